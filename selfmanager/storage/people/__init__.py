from selfmanager.storage.people.people_store import ConnectionsStore, PeopleStore

__all__ = ['ConnectionsStore', 'PeopleStore']
