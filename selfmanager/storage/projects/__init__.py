from selfmanager.storage.projects.projects_store import (
    BulkTasksStore,
    MilestonesStore,
    ProjectsStore,
    StagesStore,
)

__all__ = ['BulkTasksStore', 'MilestonesStore', 'ProjectsStore', 'StagesStore']
