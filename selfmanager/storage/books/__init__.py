from selfmanager.storage.books.books_store import BooksStore

__all__ = ['BooksStore']
