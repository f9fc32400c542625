"""Export and import of a user's whole data set as camelCase JSON.

The file format is the one the web client has always written: top-level
``ideas``, ``executionPipelines``, ``repeatedTasks``, ``nonRepeatedTasks``,
``regularTasks``, ``books`` and ``lastUpdated``, with camelCase fields.
Newsfeed, people and project collections were added later; a document
without them imports with those collections empty.
"""

from __future__ import annotations

import re
from dataclasses import asdict
from typing import Any

from selfmanager.core.exceptions import ValidationError
from selfmanager.storage.data_models.app_data import AppData
from selfmanager.storage.store_set import StoreSet

# AppData attribute -> export key
COLLECTION_KEYS = {
    'ideas': 'ideas',
    'execution_pipelines': 'executionPipelines',
    'repeated_tasks': 'repeatedTasks',
    'non_repeated_tasks': 'nonRepeatedTasks',
    'regular_tasks': 'regularTasks',
    'books': 'books',
    'newsfeed_posts': 'newsfeedPosts',
    'newsfeed_comments': 'newsfeedComments',
    'newsfeed_tags': 'newsfeedTags',
    'people': 'people',
    'people_connections': 'peopleConnections',
    'projects': 'projects',
    'project_milestones': 'projectMilestones',
    'project_stages': 'projectStages',
    'project_bulk_tasks': 'projectBulkTasks',
}

_CAMEL_BOUNDARY = re.compile(r'(?<!^)(?=[A-Z])')


def to_camel(name: str) -> str:
    head, *rest = name.split('_')
    return head + ''.join(part.capitalize() for part in rest)


def to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub('_', name).lower()


def _camelize(value: Any) -> Any:
    if isinstance(value, dict):
        return {to_camel(k): _camelize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_camelize(v) for v in value]
    return value


def _snakify(value: Any) -> Any:
    if isinstance(value, dict):
        return {to_snake(k): _snakify(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_snakify(v) for v in value]
    return value


def export_app_data(data: AppData) -> dict[str, Any]:
    exported: dict[str, Any] = {}
    for attr, key in COLLECTION_KEYS.items():
        exported[key] = [_camelize(asdict(entity)) for entity in getattr(data, attr)]
    exported['lastUpdated'] = data.last_updated
    return exported


def parse_app_data(payload: dict[str, Any], stores: StoreSet) -> AppData:
    """Turn an exported document back into entities.

    Raises ValidationError for anything that is not a well-formed export.
    """
    if not isinstance(payload, dict):
        raise ValidationError('Import data must be a JSON object')

    converters = dict(stores.collections())
    collections: dict[str, list] = {}
    for attr, key in COLLECTION_KEYS.items():
        items = payload.get(key) or []
        if not isinstance(items, list):
            raise ValidationError(f'"{key}" must be a list')
        store = converters[attr]
        entities = []
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                raise ValidationError(f'{key}[{index}] must be an object')
            try:
                entities.append(store.from_row(_snakify(item)))
            except (KeyError, TypeError, ValueError) as e:
                raise ValidationError(f'{key}[{index}] is malformed: {e}') from e
        collections[attr] = entities

    data = AppData(**collections)
    if isinstance(payload.get('lastUpdated'), str):
        data.last_updated = payload['lastUpdated']
    return data
