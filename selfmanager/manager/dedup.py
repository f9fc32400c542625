"""Duplicate removal for loaded collections.

Two passes, in this order: drop entries whose id was already seen, then drop
entries whose content key matches an earlier survivor. The id pass runs
first so that two records sharing an id but differing slightly in content
still collapse to one. Both passes keep the first occurrence and preserve
order, which makes the whole thing idempotent.
"""

from __future__ import annotations

from typing import Callable, Hashable, Iterable, TypeVar

from selfmanager.storage.data_models.tasks import NonRepeatedTask, RegularTask, RepeatedTask

T = TypeVar('T')


def repeated_task_key(task: RepeatedTask) -> tuple:
    return (task.title, task.description, task.frequency)


def non_repeated_task_key(task: NonRepeatedTask) -> tuple:
    return (task.title, task.description, task.deadline)


def regular_task_key(task: RegularTask) -> tuple:
    return (task.title, task.description)


def dedupe_by_id(items: Iterable[T]) -> list[T]:
    seen: set[str] = set()
    result = []
    for item in items:
        if item.id in seen:
            continue
        seen.add(item.id)
        result.append(item)
    return result


def dedupe_by_content(items: Iterable[T], key: Callable[[T], Hashable]) -> list[T]:
    seen: set[Hashable] = set()
    result = []
    for item in items:
        item_key = key(item)
        if item_key in seen:
            continue
        seen.add(item_key)
        result.append(item)
    return result


def dedupe(items: Iterable[T], key: Callable[[T], Hashable] | None = None) -> list[T]:
    """Run the id pass and, when a content key is given, the content pass."""
    result = dedupe_by_id(items)
    if key is not None:
        result = dedupe_by_content(result, key)
    return result
