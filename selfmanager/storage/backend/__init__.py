"""Data store backends."""

from selfmanager.core.config import SelfManagerConfig
from selfmanager.storage.backend.memory_table_backend import InMemoryTableBackend
from selfmanager.storage.backend.rest_table_backend import RestTableBackend
from selfmanager.storage.backend.table_backend import Row, TableBackend

__all__ = [
    'InMemoryTableBackend',
    'RestTableBackend',
    'Row',
    'TableBackend',
    'get_table_backend',
]


def get_table_backend(config: SelfManagerConfig) -> TableBackend:
    """Create the backend selected by ``config.data_store``."""
    if config.data_store == 'rest':
        return RestTableBackend.from_config(config)
    return InMemoryTableBackend()
