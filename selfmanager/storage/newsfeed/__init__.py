from selfmanager.storage.newsfeed.newsfeed_store import (
    NewsfeedCommentsStore,
    NewsfeedPostsStore,
    NewsfeedTagsStore,
)

__all__ = ['NewsfeedCommentsStore', 'NewsfeedPostsStore', 'NewsfeedTagsStore']
