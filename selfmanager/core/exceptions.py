"""Exception hierarchy shared by the stores, the managers and the server."""


class SelfManagerError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(SelfManagerError):
    """Input rejected before any network call (e.g. an empty title)."""


class NotFoundError(SelfManagerError):
    """An id is absent from the local state or the remote store."""


class InvalidStateError(SelfManagerError):
    """An idea or pipeline is not in a state that allows the operation."""


class OutOfRangeError(SelfManagerError):
    """A pipeline stage change would leave the 1..N stage range."""


class DataStoreError(SelfManagerError):
    """The remote data store rejected or failed a request."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.code = code


class NetworkError(DataStoreError):
    """Transient connectivity failure; safe to retry."""


class TableMissingError(DataStoreError):
    """The remote table does not exist; loads treat it as empty."""
