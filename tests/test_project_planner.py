from __future__ import annotations

import asyncio
import unittest

from selfmanager.core.exceptions import NotFoundError, ValidationError
from tests.helpers import make_workspace


class TestProjectPlanner(unittest.TestCase):
    def setUp(self) -> None:
        self.workspace = make_workspace()
        self.planner = self.workspace.projects
        self.project = asyncio.run(self.planner.create_project("Launch site", priority="high"))

    def test_create_validates(self) -> None:
        with self.assertRaises(ValidationError):
            asyncio.run(self.planner.create_project(""))
        with self.assertRaises(ValidationError):
            asyncio.run(self.planner.create_project("Side thing", status="someday"))
        with self.assertRaises(ValidationError):
            asyncio.run(
                self.planner.create_project("Backwards", start_date="2024-05-01", end_date="2024-04-01")
            )
        self.assertEqual([self.project], self.planner.list_projects())

    def test_update_project(self) -> None:
        updated = asyncio.run(self.planner.update_project(self.project.id, status="active"))
        self.assertEqual("active", updated.status)
        self.assertEqual([updated], self.planner.list_projects("active"))
        with self.assertRaises(ValidationError):
            asyncio.run(self.planner.update_project(self.project.id, created_at="2020-01-01"))

    def test_milestones_and_stages_keep_their_order(self) -> None:
        for name in ("Design", "Build", "Ship"):
            asyncio.run(self.planner.add_milestone(self.project.id, name))
            asyncio.run(self.planner.add_stage(self.project.id, name))

        self.assertEqual([0, 1, 2], [m.order_index for m in self.planner.list_milestones(self.project.id)])
        self.assertEqual(["Design", "Build", "Ship"], [s.name for s in self.planner.list_stages(self.project.id)])

        first = self.planner.list_stages(self.project.id)[0]
        self.assertTrue(asyncio.run(self.planner.toggle_stage(first.id)).is_completed)
        self.assertFalse(asyncio.run(self.planner.toggle_stage(first.id)).is_completed)

        with self.assertRaises(NotFoundError):
            asyncio.run(self.planner.add_milestone("missing", "Orphan"))
        milestone = self.planner.list_milestones(self.project.id)[0]
        with self.assertRaises(ValidationError):
            asyncio.run(self.planner.update_milestone(milestone.id, status="late"))

    def test_generate_tasks_from_active_bulk_tasks(self) -> None:
        asyncio.run(self.planner.add_bulk_task(self.project.id, "Write copy", frequency="weekly"))
        asyncio.run(self.planner.add_bulk_task(self.project.id, "Check analytics"))
        asyncio.run(self.planner.add_bulk_task(self.project.id, "Paused", is_active=False))
        with self.assertRaises(ValidationError):
            asyncio.run(self.planner.add_bulk_task(self.project.id, "Hourly", frequency="hourly"))

        created = asyncio.run(self.planner.generate_tasks(self.project.id))

        self.assertEqual({"Write copy", "Check analytics"}, {t.title for t in created})
        self.assertEqual({"Launch site"}, {t.project for t in created})
        weekly = next(t for t in created if t.title == "Write copy")
        self.assertEqual("weekly", weekly.frequency)
        self.assertEqual(2, len(self.workspace.stores.repeated_tasks))

        # Generating again adds nothing
        self.assertEqual([], asyncio.run(self.planner.generate_tasks(self.project.id)))
        self.assertEqual(2, len(self.workspace.backend.rows("repeated_tasks")))

    def test_delete_project_cascades_but_keeps_generated_tasks(self) -> None:
        asyncio.run(self.planner.add_milestone(self.project.id, "Design"))
        asyncio.run(self.planner.add_stage(self.project.id, "Build"))
        asyncio.run(self.planner.add_bulk_task(self.project.id, "Write copy"))
        asyncio.run(self.planner.generate_tasks(self.project.id))

        self.assertTrue(asyncio.run(self.planner.delete_project(self.project.id)))

        for table in ("projects", "project_milestones", "project_stages", "project_bulk_tasks"):
            self.assertEqual([], self.workspace.backend.rows(table))
        self.assertEqual(1, len(self.workspace.stores.repeated_tasks))
        self.assertFalse(asyncio.run(self.planner.delete_project(self.project.id)))


if __name__ == "__main__":
    unittest.main()
