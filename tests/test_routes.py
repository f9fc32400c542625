from __future__ import annotations

import unittest

from fastapi.testclient import TestClient

from selfmanager.core.exceptions import NetworkError
from selfmanager.server.app import app
from selfmanager.server.dependencies import get_user_workspace
from tests.helpers import make_workspace


class TestRoutes(unittest.TestCase):
    def setUp(self) -> None:
        self.workspace = make_workspace()
        app.dependency_overrides[get_user_workspace] = lambda: self.workspace
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    def test_health(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(200, response.status_code)
        self.assertEqual("ok", response.json()["status"])

    def test_idea_lifecycle(self) -> None:
        created = self.client.post("/api/ideas", json={"title": "Build CLI", "tags": ["tools"]})
        self.assertEqual(201, created.status_code)
        idea_id = created.json()["id"]

        promoted = self.client.post(f"/api/ideas/{idea_id}/promote")
        self.assertEqual(201, promoted.status_code)
        pipeline = promoted.json()["pipeline"]
        self.assertEqual("Product", pipeline["current_stage_name"])
        self.assertEqual("Build CLI", pipeline["idea_title"])

        self.assertEqual(409, self.client.post(f"/api/ideas/{idea_id}/complete").status_code)
        for _ in range(5):
            moved = self.client.post(f"/api/pipelines/{pipeline['id']}/advance", json={"direction": 1})
            self.assertEqual(200, moved.status_code)
        self.assertEqual("Sale", moved.json()["current_stage_name"])
        self.assertEqual(
            409,
            self.client.post(f"/api/pipelines/{pipeline['id']}/advance", json={"direction": 1}).status_code,
        )
        self.assertEqual(
            400,
            self.client.post(f"/api/pipelines/{pipeline['id']}/advance", json={"direction": 3}).status_code,
        )

        completed = self.client.post(f"/api/ideas/{idea_id}/complete")
        self.assertEqual("completed", completed.json()["status"])

        deleted = self.client.delete(f"/api/ideas/{idea_id}")
        self.assertEqual(200, deleted.status_code)
        self.assertTrue(deleted.json()["existed"])
        self.assertEqual([], self.client.get("/api/pipelines").json())
        self.assertFalse(self.client.delete(f"/api/ideas/{idea_id}").json()["existed"])

    def test_validation_and_not_found(self) -> None:
        self.assertEqual(400, self.client.post("/api/ideas", json={"title": "  "}).status_code)
        self.assertEqual(404, self.client.post("/api/ideas/missing/archive").status_code)
        self.assertEqual(400, self.client.get("/api/tasks/weekly").status_code)

    def test_tasks_and_agenda(self) -> None:
        habit = self.client.post("/api/tasks/repeated", json={"title": "Stretch", "time_slot": "morning"})
        self.assertEqual(201, habit.status_code)
        habit_id = habit.json()["id"]
        self.client.post("/api/tasks/non-repeated", json={"title": "Taxes", "deadline": "2024-03-05"})
        self.assertEqual(
            400, self.client.post("/api/tasks/non-repeated", json={"title": "Dentist"}).status_code
        )

        toggled = self.client.post(f"/api/tasks/repeated/{habit_id}/toggle", json={"today": "2024-03-05"})
        self.assertEqual(1, toggled.json()["streak"])
        toggled = self.client.post(f"/api/tasks/repeated/{habit_id}/toggle", json={"today": "2024-03-05"})
        self.assertEqual(1, toggled.json()["streak"])

        agenda = self.client.get("/api/tasks/today", params={"day": "2024-03-05"}).json()
        self.assertEqual(["Stretch", "Taxes"], [item["title"] for item in agenda])
        self.assertEqual("completed", agenda[0]["status"])

        overdue = self.client.get("/api/tasks/non-repeated").json()
        self.assertEqual("overdue", overdue[0]["display_status"])

        deleted = self.client.delete(f"/api/tasks/repeated/{habit_id}")
        self.assertEqual(200, deleted.status_code)
        self.assertEqual([], self.client.get("/api/tasks/repeated").json())

    def test_books(self) -> None:
        created = self.client.post("/api/books", json={"title": "Dune", "author": "Frank Herbert"})
        self.assertEqual(201, created.status_code)
        book_id = created.json()["id"]

        updated = self.client.patch(f"/api/books/{book_id}", json={"status": "reading", "rating": 5})
        self.assertEqual(200, updated.status_code)
        self.assertEqual("reading", updated.json()["status"])
        self.assertIsNotNone(updated.json()["started_at"])
        self.assertEqual(5, updated.json()["rating"])
        self.assertEqual(400, self.client.patch(f"/api/books/{book_id}", json={"rating": 9}).status_code)

        listed = self.client.get("/api/books", params={"status": "reading"}).json()
        self.assertEqual(["Dune"], [b["title"] for b in listed])
        self.assertTrue(self.client.delete(f"/api/books/{book_id}").json()["existed"])

    def test_rejected_book_patch_changes_nothing(self) -> None:
        book_id = self.client.post("/api/books", json={"title": "Dune", "author": "Frank Herbert"}).json()["id"]
        response = self.client.patch(
            f"/api/books/{book_id}", json={"title": "Dune Messiah", "status": "completed", "rating": 9}
        )
        self.assertEqual(400, response.status_code)
        book = self.client.get("/api/books").json()[0]
        self.assertEqual(("Dune", "want-to-read", None), (book["title"], book["status"], book["rating"]))
        self.assertIsNone(book["completed_at"])

    def test_export_import_and_sync(self) -> None:
        self.client.post("/api/ideas", json={"title": "Build CLI"})
        exported = self.client.get("/api/data/export").json()
        self.assertEqual(1, len(exported["ideas"]))

        self.workspace.backend.set_failure("ideas", NetworkError("offline"))
        imported = self.client.post("/api/data/import", json=exported)
        self.assertEqual(200, imported.status_code)
        self.assertEqual(1, imported.json()["counts"]["ideas"])
        self.assertEqual(1, len(self.client.get("/api/sync").json()["pending_sync"]["ideas"]))

        self.workspace.backend.clear_failure("ideas")
        synced = self.client.post("/api/sync").json()
        self.assertEqual(1, synced["synced"])
        self.assertEqual({}, synced["pending_sync"])

        self.assertEqual(400, self.client.post("/api/data/import", json={"ideas": "nope"}).status_code)
        summary = self.client.post("/api/data/reload").json()
        self.assertEqual(1, summary["counts"]["ideas"])

    def test_newsfeed(self) -> None:
        tag = self.client.post("/api/newsfeed/tags", json={"name": "Tools"}).json()
        created = self.client.post(
            "/api/newsfeed/posts",
            json={"title": "Useful", "url": "https://example.com", "tag_ids": [tag["id"]]},
        )
        self.assertEqual(201, created.status_code)
        post = created.json()
        self.assertEqual(["Tools"], [t["name"] for t in post["tags"]])
        self.assertEqual("example.com", post["url_metadata"]["site_name"])

        comment = self.client.post(f"/api/newsfeed/posts/{post['id']}/comments", json={"content": "Later"})
        self.assertEqual(201, comment.status_code)
        listed = self.client.get("/api/newsfeed/posts", params={"tags": [tag["id"]]}).json()
        self.assertEqual(["Later"], [c["content"] for c in listed[0]["comments"]])

        self.assertEqual(400, self.client.post("/api/newsfeed/posts", json={"title": "No url"}).status_code)
        self.client.post(f"/api/newsfeed/posts/{post['id']}/archive")
        self.assertEqual([], self.client.get("/api/newsfeed/posts").json())
        self.assertEqual(
            "Link to example.com",
            self.client.get("/api/newsfeed/url-metadata", params={"url": "https://example.com/x"}).json()["description"],
        )

    def test_people(self) -> None:
        ada = self.client.post(
            "/api/people",
            json={"name": "Ada", "helpfulness_rating": 5, "skills": [{"skill_name": "coding"}]},
        ).json()
        grace = self.client.post("/api/people", json={"name": "Grace"}).json()
        self.assertEqual(400, self.client.post("/api/people", json={"name": "Bad", "helpfulness_rating": 9}).status_code)

        connection = self.client.post(
            "/api/people/connections",
            json={"person_a_id": ada["id"], "person_b_id": grace["id"], "relationship_type": "mentor"},
        )
        self.assertEqual(201, connection.status_code)
        linked = self.client.get(f"/api/people/{grace['id']}/connections").json()
        self.assertEqual(["Ada"], [c["person"]["name"] for c in linked])

        self.assertEqual(["Ada"], [p["name"] for p in self.client.get("/api/people", params={"skill": "coding"}).json()])
        self.assertEqual(["Ada", "Grace"], [p["name"] for p in self.client.get("/api/people").json()])
        self.assertTrue(self.client.delete(f"/api/people/{ada['id']}").json()["existed"])
        self.assertEqual([], self.client.get(f"/api/people/{grace['id']}/connections").json())
        self.assertEqual(404, self.client.get(f"/api/people/{ada['id']}").status_code)

    def test_projects(self) -> None:
        project = self.client.post("/api/projects", json={"name": "Launch site"}).json()
        project_id = project["id"]
        self.assertEqual("planning", project["status"])

        self.assertEqual(201, self.client.post(f"/api/projects/{project_id}/milestones", json={"name": "Design"}).status_code)
        stage = self.client.post(f"/api/projects/{project_id}/stages", json={"name": "Build"}).json()
        self.assertTrue(self.client.post(f"/api/stages/{stage['id']}/toggle").json()["is_completed"])
        self.client.post(f"/api/projects/{project_id}/bulk-tasks", json={"title": "Write copy", "frequency": "weekly"})

        detail = self.client.get(f"/api/projects/{project_id}").json()
        self.assertEqual((1, 1, 1), (len(detail["milestones"]), len(detail["stages"]), len(detail["bulk_tasks"])))

        generated = self.client.post(f"/api/projects/{project_id}/generate-tasks").json()
        self.assertEqual(["Write copy"], [t["title"] for t in generated])
        self.assertEqual(["Write copy"], [t["title"] for t in self.client.get("/api/tasks/repeated").json()])

        self.assertEqual(404, self.client.post("/api/projects/missing/generate-tasks").status_code)
        self.assertTrue(self.client.delete(f"/api/projects/{project_id}").json()["existed"])
        self.assertEqual(404, self.client.get(f"/api/projects/{project_id}").status_code)


if __name__ == "__main__":
    unittest.main()
