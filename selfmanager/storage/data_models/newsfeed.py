"""Data models for the personal newsfeed: bookmarked links, notes and posts."""

from dataclasses import dataclass, field

from selfmanager.utils.dates import now_iso

POST_TYPES = ('link', 'note', 'post')
DEFAULT_TAG_COLOR = '#3B82F6'


@dataclass
class NewsfeedTag:
    id: str  # UUID
    name: str
    color: str = DEFAULT_TAG_COLOR
    created_at: str = field(default_factory=now_iso)


@dataclass
class NewsfeedPost:
    """A saved link, note or free-form post.

    Archived posts are kept but left out of the feed.
    """

    id: str  # UUID
    title: str
    content: str = ''
    url: str | None = None
    post_type: str = 'link'  # 'link', 'note', 'post'
    url_metadata: dict[str, str] = field(default_factory=dict)  # site_name, title, description
    tag_ids: list[str] = field(default_factory=list)
    is_archived: bool = False
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)


@dataclass
class NewsfeedComment:
    id: str  # UUID
    post_id: str  # Post commented on
    content: str
    created_at: str = field(default_factory=now_iso)
