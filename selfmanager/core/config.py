"""Configuration for the SelfManager service.

Values are read from an optional YAML file and then overridden by
environment variables, so a deployment can run from env vars alone.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, SecretStr

from selfmanager.core.logger import selfmanager_logger as logger

DEFAULT_CONFIG_FILE = 'config.yaml'

ENV_OVERRIDES = {
    'SUPABASE_URL': 'supabase_url',
    'SUPABASE_KEY': 'supabase_key',
    'SELFMANAGER_DATA_STORE': 'data_store',
    'SELFMANAGER_REQUEST_TIMEOUT': 'request_timeout',
    'SELFMANAGER_MAX_RETRIES': 'max_retries',
    'SELFMANAGER_DEDUP_REGULAR_TASKS': 'dedup_regular_tasks',
    'SELFMANAGER_HOST': 'host',
    'SELFMANAGER_PORT': 'port',
}


class SelfManagerConfig(BaseModel):
    """Runtime configuration.

    Attributes:
        data_store: 'memory' keeps everything in process, 'rest' talks to a
            Supabase (PostgREST) project.
        supabase_url: Base URL of the Supabase project.
        supabase_key: API key sent as ``apikey`` and bearer token.
        request_timeout: Seconds before a data store request is abandoned.
        max_retries: Extra attempts for idempotent requests that hit a
            network error.
        retry_delay: Seconds to wait between those attempts.
        dedup_regular_tasks: Also drop regular tasks with identical
            (title, description) at load time.
    """

    data_store: str = Field(default='memory', pattern='^(memory|rest)$')
    supabase_url: str | None = None
    supabase_key: SecretStr | None = None
    request_timeout: float = 10.0
    max_retries: int = Field(default=2, ge=0)
    retry_delay: float = Field(default=0.25, ge=0)
    dedup_regular_tasks: bool = False
    host: str = '127.0.0.1'
    port: int = 8000


def _read_config_file(path: Path) -> dict[str, Any]:
    """Read the YAML config file, returning an empty mapping if absent."""
    if not path.exists():
        return {}
    with path.open(encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        logger.warning(f'Ignoring config file {path}: expected a mapping')
        return {}
    return data


def load_config(config_file: str | None = None) -> SelfManagerConfig:
    """Build the configuration from the YAML file and the environment."""
    path = Path(config_file or os.getenv('SELFMANAGER_CONFIG', DEFAULT_CONFIG_FILE))
    values = _read_config_file(path)

    for env_name, field_name in ENV_OVERRIDES.items():
        env_value = os.getenv(env_name)
        if env_value is not None and env_value != '':
            values[field_name] = env_value

    config = SelfManagerConfig(**values)
    if config.data_store == 'rest' and not config.supabase_url:
        logger.warning('data_store is "rest" but SUPABASE_URL is not set')
    return config
