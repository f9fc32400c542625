from selfmanager.storage.ideas.ideas_store import IdeasStore

__all__ = ['IdeasStore']
