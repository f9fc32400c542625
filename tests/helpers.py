from __future__ import annotations

from itertools import count

from selfmanager.manager.workspace import UserWorkspace
from selfmanager.storage.backend.memory_table_backend import InMemoryTableBackend

USER_ID = "11111111-1111-4111-8111-111111111111"


def uuid_factory(prefix: str = "aaaaaaaa"):
    """Deterministic UUID4-shaped ids: aaaaaaaa-0000-4000-8000-000000000001, ..."""
    counter = count(1)

    def make() -> str:
        return f"{prefix}-0000-4000-8000-{next(counter):012d}"

    return make


def make_workspace(
    backend: InMemoryTableBackend | None = None,
    user_id: str = USER_ID,
    dedup_regular_tasks: bool = False,
) -> UserWorkspace:
    return UserWorkspace(
        backend or InMemoryTableBackend(record_calls=True),
        user_id,
        dedup_regular_tasks=dedup_regular_tasks,
    )


def idea_row(idea_id: str, title: str, status: str = "parking", user_id: str = USER_ID) -> dict:
    return {
        "id": idea_id,
        "user_id": user_id,
        "title": title,
        "description": "",
        "created_at": "2024-01-01T00:00:00+00:00",
        "priority": "medium",
        "tags": [],
        "status": status,
    }


def pipeline_row(pipeline_id: str, idea_id: str, stage: int = 1, user_id: str = USER_ID) -> dict:
    return {
        "id": pipeline_id,
        "user_id": user_id,
        "idea_id": idea_id,
        "current_stage": stage,
        "stages": [],
        "created_at": "2024-01-01T00:00:00+00:00",
        "updated_at": "2024-01-01T00:00:00+00:00",
        "notes": "",
    }


def repeated_task_row(
    task_id: str,
    title: str,
    description: str = "",
    frequency: str = "daily",
    user_id: str = USER_ID,
    **extra,
) -> dict:
    row = {
        "id": task_id,
        "user_id": user_id,
        "title": title,
        "description": description,
        "frequency": frequency,
        "is_active": True,
        "last_completed": None,
        "streak": 0,
        "created_at": "2024-01-01T00:00:00+00:00",
        "priority": "medium",
        "project": None,
        "time_slot": None,
    }
    row.update(extra)
    return row


def regular_task_row(task_id: str, title: str, description: str = "", user_id: str = USER_ID) -> dict:
    return {
        "id": task_id,
        "user_id": user_id,
        "title": title,
        "description": description,
        "priority": "medium",
        "status": "pending",
        "created_at": "2024-01-01T00:00:00+00:00",
        "completed_at": None,
        "project": None,
        "time_slot": None,
    }
