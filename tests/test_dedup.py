from __future__ import annotations

import unittest

from selfmanager.manager.data_loader import dedupe_app_data
from selfmanager.manager.dedup import dedupe, non_repeated_task_key, repeated_task_key
from selfmanager.storage.data_models.app_data import AppData
from selfmanager.storage.data_models.tasks import NonRepeatedTask, RegularTask, RepeatedTask


def _habit(task_id: str, title: str, description: str = "", frequency: str = "daily") -> RepeatedTask:
    return RepeatedTask(id=task_id, title=title, description=description, frequency=frequency)


class TestDedup(unittest.TestCase):
    def test_same_id_keeps_first(self) -> None:
        first = _habit("a", "Stretch")
        second = _habit("a", "Stretch more")
        self.assertEqual([first], dedupe([first, second]))

    def test_same_content_different_ids_keeps_first(self) -> None:
        first = _habit("a", "Stretch", "10 minutes")
        second = _habit("b", "Stretch", "10 minutes")
        weekly = _habit("c", "Stretch", "10 minutes", frequency="weekly")
        result = dedupe([first, second, weekly], repeated_task_key)
        self.assertEqual(["a", "c"], [t.id for t in result])

    def test_dedup_is_idempotent(self) -> None:
        tasks = [
            _habit("a", "Stretch"),
            _habit("a", "Stretch"),
            _habit("b", "Stretch"),
            _habit("c", "Read"),
        ]
        once = dedupe(tasks, repeated_task_key)
        twice = dedupe(once, repeated_task_key)
        self.assertEqual(once, twice)
        self.assertEqual(["a", "c"], [t.id for t in once])

    def test_one_off_tasks_key_on_deadline(self) -> None:
        tasks = [
            NonRepeatedTask(id="a", title="File taxes", description="federal", deadline="2024-04-15"),
            NonRepeatedTask(id="b", title="File taxes", description="federal", deadline="2024-04-15"),
            NonRepeatedTask(id="c", title="File taxes", description="federal", deadline="2025-04-15"),
        ]
        self.assertEqual(["a", "c"], [t.id for t in dedupe(tasks, non_repeated_task_key)])
        data = dedupe_app_data(AppData(non_repeated_tasks=tasks))
        self.assertEqual(["a", "c"], [t.id for t in data.non_repeated_tasks])

    def test_regular_tasks_only_deduplicated_by_content_when_enabled(self) -> None:
        data = AppData(
            regular_tasks=[
                RegularTask(id="a", title="Email", description="inbox"),
                RegularTask(id="b", title="Email", description="inbox"),
                RegularTask(id="a", title="Email", description="inbox"),
            ]
        )
        self.assertEqual(["a", "b"], [t.id for t in dedupe_app_data(data).regular_tasks])
        self.assertEqual(
            ["a"],
            [t.id for t in dedupe_app_data(data, dedup_regular_tasks=True).regular_tasks],
        )


if __name__ == "__main__":
    unittest.main()
