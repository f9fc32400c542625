from __future__ import annotations

import asyncio
import unittest

from selfmanager.core.exceptions import NotFoundError, ValidationError
from selfmanager.manager.newsfeed import extract_url_metadata
from selfmanager.storage.data_models.newsfeed import NewsfeedPost
from tests.helpers import make_workspace


def _post(n: int, **extra) -> NewsfeedPost:
    fields = {"title": f"Post {n}", "post_type": "note", "created_at": f"2024-01-{n:02d}T00:00:00"}
    fields.update(extra)
    return NewsfeedPost(id=f"aaaaaaaa-0000-4000-8000-{n:012d}", **fields)


class TestNewsfeed(unittest.TestCase):
    def setUp(self) -> None:
        self.workspace = make_workspace()
        self.feed = self.workspace.newsfeed

    def test_link_post_gets_host_metadata(self) -> None:
        post = asyncio.run(self.feed.create_post("Read later", url="https://example.com/a/b"))
        self.assertEqual(
            {"site_name": "example.com", "title": "example.com", "description": "Link to example.com"},
            post.url_metadata,
        )
        self.assertEqual(1, len(self.workspace.backend.rows("newsfeed_posts")))
        self.assertEqual({}, extract_url_metadata("not a url"))

    def test_link_post_needs_url(self) -> None:
        with self.assertRaises(ValidationError):
            asyncio.run(self.feed.create_post("No link"))
        with self.assertRaises(ValidationError):
            asyncio.run(self.feed.create_post("Odd", post_type="tweet"))
        self.assertEqual([], self.feed.list_posts())

    def test_feed_is_newest_first_and_paginated(self) -> None:
        self.workspace.stores.newsfeed_posts.replace_all([_post(n) for n in range(1, 6)])
        self.assertEqual(["Post 5", "Post 4"], [p.title for p in self.feed.list_posts(page=0, limit=2)])
        self.assertEqual(["Post 1"], [p.title for p in self.feed.list_posts(page=2, limit=2)])
        self.assertEqual([], self.feed.list_posts(page=3, limit=2))
        with self.assertRaises(ValidationError):
            self.feed.list_posts(limit=0)

    def test_filters_and_archive(self) -> None:
        self.workspace.stores.newsfeed_posts.replace_all(
            [
                _post(1, content="About Python packaging"),
                _post(2, title="Link", post_type="link", url="https://example.com"),
                _post(3, title="python tips"),
            ]
        )
        self.assertEqual(["python tips", "Post 1"], [p.title for p in self.feed.list_posts(search="PYTHON")])
        self.assertEqual(["Link"], [p.title for p in self.feed.list_posts(post_type="link")])

        asyncio.run(self.feed.archive_post(_post(3).id))
        self.assertEqual(["Link", "Post 1"], [p.title for p in self.feed.list_posts()])
        self.assertTrue(self.workspace.stores.newsfeed_posts.require(_post(3).id).is_archived)

    def test_tags(self) -> None:
        tools = asyncio.run(self.feed.create_tag("Tools"))
        asyncio.run(self.feed.create_tag("art", color="#FF0000"))
        with self.assertRaises(ValidationError):
            asyncio.run(self.feed.create_tag(" tools "))
        self.assertEqual(["art", "Tools"], [t.name for t in self.feed.list_tags()])

        post = asyncio.run(self.feed.create_post("Idea", post_type="note"))
        with self.assertRaises(NotFoundError):
            asyncio.run(self.feed.add_tags_to_post(post.id, ["missing"]))
        post = asyncio.run(self.feed.add_tags_to_post(post.id, [tools.id, tools.id]))
        self.assertEqual([tools.id], post.tag_ids)
        self.assertEqual([post], self.feed.list_posts(tag_ids=[tools.id]))

        asyncio.run(self.feed.delete_tag(tools.id))
        self.assertEqual([], self.workspace.stores.newsfeed_posts.require(post.id).tag_ids)
        self.assertEqual([], self.feed.list_posts(tag_ids=[tools.id]))

    def test_comments_and_cascading_delete(self) -> None:
        post = asyncio.run(self.feed.create_post("Idea", post_type="note"))
        asyncio.run(self.feed.add_comment(post.id, "First"))
        asyncio.run(self.feed.add_comment(post.id, "Second"))
        with self.assertRaises(NotFoundError):
            asyncio.run(self.feed.add_comment("missing", "Orphan"))
        with self.assertRaises(ValidationError):
            asyncio.run(self.feed.add_comment(post.id, "  "))
        self.assertEqual(2, len(self.feed.comments_for(post.id)))

        self.assertTrue(asyncio.run(self.feed.delete_post(post.id)))
        self.assertEqual([], self.workspace.backend.rows("newsfeed_comments"))
        self.assertEqual([], self.workspace.backend.rows("newsfeed_posts"))

    def test_update_post_rejects_unknown_fields(self) -> None:
        post = asyncio.run(self.feed.create_post("Idea", post_type="note"))
        updated = asyncio.run(self.feed.update_post(post.id, content="More detail"))
        self.assertEqual("More detail", updated.content)
        with self.assertRaises(ValidationError):
            asyncio.run(self.feed.update_post(post.id, is_archived=True))


if __name__ == "__main__":
    unittest.main()
