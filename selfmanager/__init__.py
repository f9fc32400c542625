"""SelfManager: ideas, execution pipelines, tasks and a book log."""

__version__ = '0.4.0'


def get_version() -> str:
    return __version__
