from selfmanager.storage.pipelines.pipelines_store import PipelinesStore

__all__ = ['PipelinesStore']
