from selfmanager.storage.tasks.tasks_store import (
    NonRepeatedTasksStore,
    RegularTasksStore,
    RepeatedTasksStore,
)

__all__ = ['NonRepeatedTasksStore', 'RegularTasksStore', 'RepeatedTasksStore']
