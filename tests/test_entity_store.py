from __future__ import annotations

import asyncio
import unittest

from selfmanager.core.exceptions import DataStoreError, NetworkError, ValidationError
from selfmanager.storage.backend.memory_table_backend import InMemoryTableBackend
from selfmanager.storage.data_models.book import Book
from selfmanager.storage.data_models.tasks import RegularTask
from selfmanager.storage.books.books_store import BooksStore
from selfmanager.storage.tasks.tasks_store import RegularTasksStore, RepeatedTasksStore
from tests.helpers import USER_ID, regular_task_row, repeated_task_row

TASK_ID = "66666666-6666-4666-8666-666666666666"


class TestEntityStore(unittest.TestCase):
    def setUp(self) -> None:
        self.backend = InMemoryTableBackend(record_calls=True)
        self.store = RegularTasksStore(self.backend, USER_ID)

    def test_save_writes_row_with_user_id(self) -> None:
        asyncio.run(self.store.save(RegularTask(id=TASK_ID, title="Email")))
        rows = self.backend.rows("regular_tasks")
        self.assertEqual(1, len(rows))
        self.assertEqual(USER_ID, rows[0]["user_id"])
        self.assertFalse(self.store.is_pending(TASK_ID))

    def test_failed_save_keeps_local_copy_pending(self) -> None:
        self.backend.set_failure("regular_tasks", NetworkError("offline"))
        asyncio.run(self.store.save(RegularTask(id=TASK_ID, title="Email")))

        self.assertIn(TASK_ID, self.store)
        self.assertEqual([TASK_ID], self.store.pending_ids())

        self.assertEqual(0, asyncio.run(self.store.sync_pending()))
        self.backend.clear_failure("regular_tasks")
        self.assertEqual(1, asyncio.run(self.store.sync_pending()))
        self.assertEqual([], self.store.pending_ids())

    def test_invalid_entity_is_not_stored(self) -> None:
        with self.assertRaises(ValidationError):
            asyncio.run(self.store.save(RegularTask(id=TASK_ID, title="Email", priority="someday")))
        self.assertNotIn(TASK_ID, self.store)

    def test_legacy_id_delete_makes_no_backend_call(self) -> None:
        self.store.replace_all([RegularTask(id="1699999999999", title="Old")])
        self.assertTrue(asyncio.run(self.store.delete("1699999999999")))
        self.assertNotIn("1699999999999", self.store)
        self.assertEqual([], self.backend.calls_for("delete"))

    def test_delete_of_absent_remote_row_is_success(self) -> None:
        self.store.replace_all([RegularTask(id=TASK_ID, title="Email")])
        self.assertTrue(asyncio.run(self.store.delete(TASK_ID)))
        self.assertEqual(1, len(self.backend.calls_for("delete", "regular_tasks")))
        self.assertFalse(self.store.is_pending(TASK_ID))

    def test_failed_delete_still_removes_locally(self) -> None:
        asyncio.run(self.store.save(RegularTask(id=TASK_ID, title="Email")))
        self.backend.set_failure("regular_tasks", DataStoreError("denied"))

        asyncio.run(self.store.delete(TASK_ID))

        self.assertNotIn(TASK_ID, self.store)
        self.assertTrue(self.store.is_pending(TASK_ID))
        self.backend.clear_failure("regular_tasks")
        self.assertEqual(1, asyncio.run(self.store.sync_pending()))
        self.assertEqual([], self.backend.rows("regular_tasks"))

    def test_fetch_skips_malformed_rows(self) -> None:
        broken = regular_task_row(TASK_ID, "Email")
        del broken["title"]
        self.backend.seed("regular_tasks", [broken, regular_task_row("77777777-7777-4777-8777-777777777777", "Call")])
        tasks = asyncio.run(self.store.fetch())
        self.assertEqual(["Call"], [t.title for t in tasks])

    def test_legacy_time_slot_value_is_dropped(self) -> None:
        store = RepeatedTasksStore(self.backend, USER_ID)
        self.backend.seed("repeated_tasks", [repeated_task_row(TASK_ID, "Stretch", time_slot="no-time-slot")])
        self.assertIsNone(asyncio.run(store.fetch())[0].time_slot)

    def test_book_rating_bounds(self) -> None:
        store = BooksStore(self.backend, USER_ID)
        with self.assertRaises(ValidationError):
            asyncio.run(store.save(Book(id=TASK_ID, title="Dune", author="Herbert", rating=6)))
        asyncio.run(store.save(Book(id=TASK_ID, title="Dune", author="Herbert", rating=5)))
        self.assertEqual(5, store.require(TASK_ID).rating)

    def test_backend_records_calls_only_when_asked(self) -> None:
        quiet = InMemoryTableBackend()
        store = RegularTasksStore(quiet, USER_ID)
        for n in range(3):
            asyncio.run(store.save(RegularTask(id=TASK_ID, title=f"Email {n}")))
        asyncio.run(store.fetch())
        self.assertEqual([], quiet.calls)
        self.assertEqual(1, len(quiet.rows("regular_tasks")))

    def test_remapped_entity_replaces_its_legacy_row(self) -> None:
        self.backend.seed("regular_tasks", [regular_task_row("1699999999999", "Email")])
        self.store.replace_all([RegularTask(id=TASK_ID, title="Email")])
        self.store.mark_remapped(TASK_ID, "1699999999999")
        self.assertTrue(self.store.is_pending(TASK_ID))

        self.assertEqual(1, asyncio.run(self.store.sync_pending()))
        self.assertEqual([TASK_ID], [r["id"] for r in self.backend.rows("regular_tasks")])
        self.assertEqual([], self.store.pending_ids())


if __name__ == "__main__":
    unittest.main()
