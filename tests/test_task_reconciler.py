from __future__ import annotations

import asyncio
import unittest
from datetime import date

from selfmanager.core.exceptions import NotFoundError, ValidationError
from selfmanager.manager.task_reconciler import (
    display_status,
    is_overdue,
    toggle_repeated_task_completion,
    toggle_task_completion,
)
from selfmanager.storage.data_models.tasks import NonRepeatedTask, RegularTask, RepeatedTask
from tests.helpers import make_workspace


class TestTaskRules(unittest.TestCase):
    def test_streak_counts_once_per_day(self) -> None:
        task = RepeatedTask(id="t", title="Stretch", streak=4, last_completed="2024-03-04")
        done = toggle_repeated_task_completion(task, "2024-03-05")
        again = toggle_repeated_task_completion(done, "2024-03-05")
        self.assertEqual(5, done.streak)
        self.assertEqual("2024-03-05", done.last_completed)
        self.assertEqual(5, again.streak)

    def test_next_day_increments_again(self) -> None:
        task = RepeatedTask(id="t", title="Stretch", streak=5, last_completed="2024-03-05T08:00:00")
        self.assertEqual(6, toggle_repeated_task_completion(task, date(2024, 3, 6)).streak)

    def test_toggle_flips_status_and_completed_at(self) -> None:
        task = RegularTask(id="t", title="Email")
        done = toggle_task_completion(task, now="2024-03-05T10:00:00+00:00")
        self.assertEqual("completed", done.status)
        self.assertEqual("2024-03-05T10:00:00+00:00", done.completed_at)
        undone = toggle_task_completion(done)
        self.assertEqual("pending", undone.status)
        self.assertIsNone(undone.completed_at)

    def test_overdue_is_derived(self) -> None:
        task = NonRepeatedTask(id="t", title="Taxes", deadline="2024-03-01")
        self.assertTrue(is_overdue(task, "2024-03-02"))
        self.assertFalse(is_overdue(task, "2024-03-01"))
        self.assertEqual("overdue", display_status(task, "2024-03-02"))
        self.assertEqual("pending", task.status)
        done = toggle_task_completion(task)
        self.assertFalse(is_overdue(done, "2024-03-02"))

    def test_repeated_display_status_follows_last_completed(self) -> None:
        task = RepeatedTask(id="t", title="Stretch", last_completed="2024-03-05")
        self.assertEqual("completed", display_status(task, "2024-03-05"))
        self.assertEqual("pending", display_status(task, "2024-03-06"))


class TestTaskReconciler(unittest.TestCase):
    def setUp(self) -> None:
        self.workspace = make_workspace()
        self.tasks = self.workspace.tasks

    def test_complete_repeated_task_persists_streak(self) -> None:
        task = asyncio.run(self.tasks.create_repeated_task("Stretch"))
        asyncio.run(self.tasks.toggle_task("repeated", task.id, today="2024-03-05"))
        asyncio.run(self.tasks.toggle_task("repeated", task.id, today="2024-03-05"))
        stored = self.workspace.stores.repeated_tasks.require(task.id)
        self.assertEqual(1, stored.streak)
        rows = self.workspace.backend.rows("repeated_tasks")
        self.assertEqual(1, rows[0]["streak"])

    def test_one_off_task_needs_a_deadline(self) -> None:
        with self.assertRaises(ValidationError):
            asyncio.run(self.tasks.create_non_repeated_task("Taxes", ""))
        self.assertEqual([], self.tasks.list_tasks("non-repeated"))

    def test_empty_title_rejected_without_network_call(self) -> None:
        with self.assertRaises(ValidationError):
            asyncio.run(self.tasks.create_regular_task("   "))
        self.assertEqual([], self.workspace.backend.calls)

    def test_unknown_kind_and_missing_task(self) -> None:
        with self.assertRaises(ValidationError):
            self.tasks.list_tasks("weekly")
        with self.assertRaises(NotFoundError):
            asyncio.run(self.tasks.toggle_task("regular", "missing"))

    def test_update_rejects_read_only_fields(self) -> None:
        task = asyncio.run(self.tasks.create_regular_task("Email"))
        with self.assertRaises(ValidationError):
            asyncio.run(self.tasks.update_task("regular", task.id, id="other"))
        updated = asyncio.run(self.tasks.update_task("regular", task.id, priority="urgent"))
        self.assertEqual("urgent", updated.priority)

    def test_agenda_for_a_day(self) -> None:
        asyncio.run(self.tasks.create_repeated_task("Stretch", time_slot="morning"))
        paused = asyncio.run(self.tasks.create_repeated_task("Run"))
        asyncio.run(self.tasks.update_task("repeated", paused.id, is_active=False))
        asyncio.run(self.tasks.create_non_repeated_task("Taxes", "2024-03-05T17:00:00"))
        asyncio.run(self.tasks.create_non_repeated_task("Dentist", "2024-03-06"))
        asyncio.run(self.tasks.create_regular_task("Email", project="work"))
        done = asyncio.run(self.tasks.create_regular_task("Laundry"))
        asyncio.run(self.tasks.toggle_task("regular", done.id))

        agenda = self.tasks.tasks_for_day("2024-03-05")

        self.assertEqual(["Stretch", "Taxes", "Email"], [item.title for item in agenda])
        self.assertEqual(["morning", "day", "day"], [item.time_slot for item in agenda])
        self.assertEqual(
            ["Stretch"], [i.title for i in self.tasks.tasks_for_day("2024-03-05", time_slot="morning")]
        )
        self.assertEqual(
            ["Email"], [i.title for i in self.tasks.tasks_for_day("2024-03-05", project="work")]
        )


if __name__ == "__main__":
    unittest.main()
