"""Stores for newsfeed posts, their comments and the tag catalog."""

from __future__ import annotations

from selfmanager.core.exceptions import ValidationError
from selfmanager.storage.backend.table_backend import Row
from selfmanager.storage.data_models.newsfeed import (
    DEFAULT_TAG_COLOR,
    POST_TYPES,
    NewsfeedComment,
    NewsfeedPost,
    NewsfeedTag,
)
from selfmanager.storage.entity_store import EntityStore
from selfmanager.utils.dates import now_iso


class NewsfeedPostsStore(EntityStore[NewsfeedPost]):
    table = 'newsfeed_posts'
    entity_name = 'post'

    def _validate(self, post: NewsfeedPost) -> None:
        super()._validate(post)
        if post.post_type not in POST_TYPES:
            raise ValidationError(f'Invalid post type: {post.post_type}')
        if post.post_type == 'link' and not post.url:
            raise ValidationError('Link posts need a url')

    def _to_row(self, post: NewsfeedPost) -> Row:
        return {
            'id': post.id,
            'title': post.title,
            'content': post.content,
            'url': post.url,
            'post_type': post.post_type,
            'url_metadata': dict(post.url_metadata),
            'tag_ids': list(post.tag_ids),
            'is_archived': post.is_archived,
            'created_at': post.created_at,
            'updated_at': post.updated_at,
        }

    def _from_row(self, row: Row) -> NewsfeedPost:
        created_at = row.get('created_at') or now_iso()
        return NewsfeedPost(
            id=row['id'],
            title=row['title'],
            content=row.get('content') or '',
            url=row.get('url') or None,
            post_type=row.get('post_type') or 'post',
            url_metadata=dict(row.get('url_metadata') or {}),
            tag_ids=list(row.get('tag_ids') or []),
            is_archived=bool(row.get('is_archived')),
            created_at=created_at,
            updated_at=row.get('updated_at') or created_at,
        )


class NewsfeedCommentsStore(EntityStore[NewsfeedComment]):
    table = 'newsfeed_comments'
    entity_name = 'comment'
    label_field = 'content'

    def _validate(self, comment: NewsfeedComment) -> None:
        super()._validate(comment)
        if not comment.post_id:
            raise ValidationError('Comment must reference a post')

    def for_post(self, post_id: str) -> list[NewsfeedComment]:
        return sorted(
            (c for c in self.all() if c.post_id == post_id),
            key=lambda c: c.created_at,
        )

    def _to_row(self, comment: NewsfeedComment) -> Row:
        return {
            'id': comment.id,
            'post_id': comment.post_id,
            'content': comment.content,
            'created_at': comment.created_at,
        }

    def _from_row(self, row: Row) -> NewsfeedComment:
        return NewsfeedComment(
            id=row['id'],
            post_id=row['post_id'],
            content=row['content'],
            created_at=row.get('created_at') or now_iso(),
        )


class NewsfeedTagsStore(EntityStore[NewsfeedTag]):
    table = 'newsfeed_tags'
    entity_name = 'tag'
    label_field = 'name'

    def find_by_name(self, name: str) -> NewsfeedTag | None:
        wanted = name.strip().lower()
        for tag in self.all():
            if tag.name.strip().lower() == wanted:
                return tag
        return None

    def _to_row(self, tag: NewsfeedTag) -> Row:
        return {
            'id': tag.id,
            'name': tag.name,
            'color': tag.color,
            'created_at': tag.created_at,
        }

    def _from_row(self, row: Row) -> NewsfeedTag:
        return NewsfeedTag(
            id=row['id'],
            name=row['name'],
            color=row.get('color') or DEFAULT_TAG_COLOR,
            created_at=row.get('created_at') or now_iso(),
        )
