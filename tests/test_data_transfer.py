from __future__ import annotations

import asyncio
import unittest

from selfmanager.core.exceptions import NetworkError, ValidationError
from selfmanager.manager.data_transfer import to_camel, to_snake
from selfmanager.utils.identifiers import is_valid_uuid
from tests.helpers import make_workspace


def _backup() -> dict:
    return {
        "ideas": [
            {
                "id": "1699999999999",
                "title": "Build CLI",
                "description": "",
                "createdAt": "2024-01-01T00:00:00.000Z",
                "priority": "high",
                "tags": ["tools"],
                "status": "in-pipeline",
            }
        ],
        "executionPipelines": [
            {
                "id": "1700000000000",
                "ideaId": "1699999999999",
                "currentStage": 2,
                "stages": [],
                "createdAt": "2024-01-01T00:00:00.000Z",
                "updatedAt": "2024-01-02T00:00:00.000Z",
                "notes": "",
            }
        ],
        "repeatedTasks": [
            {"id": "1", "title": "Stretch", "frequency": "daily", "isActive": True, "streak": 3},
        ],
        "nonRepeatedTasks": [],
        "books": [{"id": "2", "title": "Dune", "author": "Frank Herbert", "status": "reading"}],
        "lastUpdated": "2024-01-02T00:00:00.000Z",
    }


class TestDataTransfer(unittest.TestCase):
    def test_case_conversion(self) -> None:
        self.assertEqual("ideaId", to_camel("idea_id"))
        self.assertEqual("cover_image_url", to_snake("coverImageUrl"))
        self.assertEqual("title", to_snake(to_camel("title")))

    def test_import_normalizes_ids_and_writes_everything(self) -> None:
        workspace = make_workspace()

        data = asyncio.run(workspace.import_data(_backup()))

        idea = data.ideas[0]
        pipeline = data.execution_pipelines[0]
        self.assertTrue(is_valid_uuid(idea.id))
        self.assertEqual(idea.id, pipeline.idea_id)
        self.assertEqual(2, pipeline.current_stage)
        self.assertEqual(3, data.repeated_tasks[0].streak)
        self.assertEqual([], data.regular_tasks)
        self.assertEqual(
            [idea.id], [r["id"] for r in workspace.backend.rows("ideas")]
        )
        self.assertEqual(1, len(workspace.backend.rows("books")))

    def test_export_round_trips_through_import(self) -> None:
        source = make_workspace()
        asyncio.run(source.import_data(_backup()))
        exported = source.export_data()

        self.assertIn("executionPipelines", exported)
        self.assertIn("ideaId", exported["executionPipelines"][0])
        self.assertIn("lastUpdated", exported)

        target = make_workspace()
        data = asyncio.run(target.import_data(exported))
        self.assertEqual(source.snapshot().counts(), data.counts())
        self.assertEqual(
            source.stores.ideas.all()[0].id, target.stores.ideas.all()[0].id
        )

    def test_malformed_backup_changes_nothing(self) -> None:
        workspace = make_workspace()
        asyncio.run(workspace.tasks.create_regular_task("Email"))

        with self.assertRaises(ValidationError):
            asyncio.run(workspace.import_data({"ideas": "nope"}))
        with self.assertRaises(ValidationError):
            asyncio.run(workspace.import_data({"ideas": [{"id": "1"}]}))
        with self.assertRaises(ValidationError):
            asyncio.run(workspace.import_data({"books": [{"id": "1", "title": "Dune", "author": ""}]}))

        self.assertEqual(["Email"], [t.title for t in workspace.tasks.list_tasks("regular")])

    def test_import_is_fail_soft(self) -> None:
        workspace = make_workspace()
        workspace.backend.set_failure("books", NetworkError("offline"))
        data = asyncio.run(workspace.import_data(_backup()))
        self.assertEqual(1, len(data.books))
        self.assertEqual(["books"], list(workspace.pending_summary()))

    def test_import_rewrites_references_across_new_collections(self) -> None:
        workspace = make_workspace()
        backup = {
            "newsfeedTags": [{"id": "t1", "name": "Tools", "color": "#000000"}],
            "newsfeedPosts": [
                {
                    "id": "p1",
                    "title": "Useful link",
                    "url": "https://example.com",
                    "postType": "link",
                    "urlMetadata": {"siteName": "example.com"},
                    "tagIds": ["t1"],
                }
            ],
            "newsfeedComments": [{"id": "c1", "postId": "p1", "content": "Read it"}],
            "people": [
                {"id": "a", "name": "Ada", "skills": [{"skillName": "coding", "skillLevel": "expert"}]},
                {"id": "b", "name": "Grace"},
            ],
            "peopleConnections": [
                {"id": "ab", "personAId": "a", "personBId": "b", "relationshipType": "mentor"}
            ],
            "projects": [{"id": "pr", "name": "Launch site"}],
            "projectMilestones": [{"id": "m1", "projectId": "pr", "name": "Design"}],
        }

        data = asyncio.run(workspace.import_data(backup))

        tag, post, comment = data.newsfeed_tags[0], data.newsfeed_posts[0], data.newsfeed_comments[0]
        self.assertTrue(is_valid_uuid(tag.id))
        self.assertEqual([tag.id], post.tag_ids)
        self.assertEqual(post.id, comment.post_id)
        self.assertEqual({"site_name": "example.com"}, post.url_metadata)

        ada, grace = data.people
        self.assertEqual("expert", ada.skills[0].skill_level)
        connection = data.people_connections[0]
        self.assertEqual((ada.id, grace.id), (connection.person_a_id, connection.person_b_id))
        self.assertEqual(data.projects[0].id, data.project_milestones[0].project_id)

        exported = workspace.export_data()
        self.assertEqual("coding", exported["people"][0]["skills"][0]["skillName"])
        self.assertEqual([tag.id], exported["newsfeedPosts"][0]["tagIds"])


if __name__ == "__main__":
    unittest.main()
