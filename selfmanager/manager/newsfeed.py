"""The personal newsfeed: saved links, notes and posts with comments and tags."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable
from urllib.parse import urlparse

from selfmanager.core.exceptions import ValidationError
from selfmanager.core.logger import selfmanager_logger as logger
from selfmanager.storage.data_models.newsfeed import (
    DEFAULT_TAG_COLOR,
    NewsfeedComment,
    NewsfeedPost,
    NewsfeedTag,
)
from selfmanager.storage.store_set import StoreSet
from selfmanager.utils.dates import now_iso
from selfmanager.utils.identifiers import new_id

EDITABLE_POST_FIELDS = frozenset({'title', 'content', 'url', 'post_type', 'url_metadata'})
DEFAULT_PAGE_SIZE = 10


def extract_url_metadata(url: str) -> dict[str, str]:
    """Basic metadata for a link: its host stands in for name and title.

    Returns an empty dict when the url has no host.
    """
    try:
        host = urlparse(url).hostname
    except ValueError:
        host = None
    if not host:
        return {}
    return {'site_name': host, 'title': host, 'description': f'Link to {host}'}


class Newsfeed:
    def __init__(self, stores: StoreSet):
        self.posts = stores.newsfeed_posts
        self.comments = stores.newsfeed_comments
        self.tags = stores.newsfeed_tags

    def list_posts(
        self,
        page: int = 0,
        limit: int = DEFAULT_PAGE_SIZE,
        tag_ids: Iterable[str] | None = None,
        search: str | None = None,
        post_type: str | None = None,
    ) -> list[NewsfeedPost]:
        """One page of the feed, newest first, archived posts left out.

        ``search`` matches title or content, case-insensitively; ``tag_ids``
        keeps posts carrying any of the given tags.
        """
        if page < 0 or limit < 1:
            raise ValidationError('Page must be >= 0 and limit >= 1')
        wanted_tags = set(tag_ids or [])
        needle = (search or '').strip().lower()

        posts = []
        for post in self.posts.all():
            if post.is_archived:
                continue
            if post_type and post.post_type != post_type:
                continue
            if wanted_tags and not wanted_tags.intersection(post.tag_ids):
                continue
            if needle and needle not in post.title.lower() and needle not in post.content.lower():
                continue
            posts.append(post)
        posts.sort(key=lambda p: p.created_at, reverse=True)
        return posts[page * limit:(page + 1) * limit]

    def comments_for(self, post_id: str) -> list[NewsfeedComment]:
        return self.comments.for_post(post_id)

    def tags_for(self, post: NewsfeedPost) -> list[NewsfeedTag]:
        # Tags deleted since are skipped
        return [t for t in (self.tags.get(i) for i in post.tag_ids) if t is not None]

    async def create_post(
        self,
        title: str,
        content: str = '',
        url: str | None = None,
        post_type: str = 'link',
        tag_ids: Iterable[str] | None = None,
        url_metadata: dict[str, str] | None = None,
    ) -> NewsfeedPost:
        if url_metadata is None and url:
            url_metadata = extract_url_metadata(url)
        post = NewsfeedPost(
            id=new_id(),
            title=(title or '').strip(),
            content=content or '',
            url=url or None,
            post_type=post_type,
            url_metadata=dict(url_metadata or {}),
            tag_ids=self._known_tags(tag_ids),
        )
        await self.posts.save(post)
        logger.info(f'Created {post.post_type} post {post.id}')
        return post

    async def update_post(self, post_id: str, **changes) -> NewsfeedPost:
        post = self.posts.require(post_id)
        unknown = set(changes) - EDITABLE_POST_FIELDS
        if unknown:
            raise ValidationError(f'Cannot update post field(s): {", ".join(sorted(unknown))}')
        if 'title' in changes:
            changes['title'] = (changes['title'] or '').strip()
        return await self.posts.save(replace(post, updated_at=now_iso(), **changes))

    async def archive_post(self, post_id: str) -> NewsfeedPost:
        post = replace(self.posts.require(post_id), is_archived=True, updated_at=now_iso())
        await self.posts.save(post)
        logger.info(f'Archived post {post_id}')
        return post

    async def delete_post(self, post_id: str) -> bool:
        """Delete a post and its comments."""
        for comment in self.comments.for_post(post_id):
            await self.comments.delete(comment.id)
        return await self.posts.delete(post_id)

    async def add_comment(self, post_id: str, content: str) -> NewsfeedComment:
        self.posts.require(post_id)
        comment = NewsfeedComment(id=new_id(), post_id=post_id, content=(content or '').strip())
        return await self.comments.save(comment)

    async def delete_comment(self, comment_id: str) -> bool:
        return await self.comments.delete(comment_id)

    def list_tags(self) -> list[NewsfeedTag]:
        return sorted(self.tags.all(), key=lambda t: t.name.lower())

    async def create_tag(self, name: str, color: str = DEFAULT_TAG_COLOR) -> NewsfeedTag:
        name = (name or '').strip()
        if self.tags.find_by_name(name) is not None:
            raise ValidationError(f'Tag "{name}" already exists')
        return await self.tags.save(NewsfeedTag(id=new_id(), name=name, color=color or DEFAULT_TAG_COLOR))

    async def update_tag(self, tag_id: str, name: str, color: str) -> NewsfeedTag:
        tag = self.tags.require(tag_id)
        name = (name or '').strip()
        existing = self.tags.find_by_name(name)
        if existing is not None and existing.id != tag_id:
            raise ValidationError(f'Tag "{name}" already exists')
        return await self.tags.save(replace(tag, name=name, color=color or tag.color))

    async def delete_tag(self, tag_id: str) -> bool:
        """Delete a tag and take it off every post carrying it."""
        for post in self.posts.all():
            if tag_id in post.tag_ids:
                await self.posts.save(replace(post, tag_ids=[t for t in post.tag_ids if t != tag_id]))
        return await self.tags.delete(tag_id)

    async def add_tags_to_post(self, post_id: str, tag_ids: Iterable[str]) -> NewsfeedPost:
        post = self.posts.require(post_id)
        merged = list(post.tag_ids)
        for tag_id in self._known_tags(tag_ids):
            if tag_id not in merged:
                merged.append(tag_id)
        return await self.posts.save(replace(post, tag_ids=merged, updated_at=now_iso()))

    def _known_tags(self, tag_ids: Iterable[str] | None) -> list[str]:
        tag_ids = list(dict.fromkeys(tag_ids or []))
        for tag_id in tag_ids:
            self.tags.require(tag_id)
        return tag_ids
