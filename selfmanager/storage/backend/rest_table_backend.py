"""Supabase (PostgREST) implementation of TableBackend."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, TypeVar

import httpx

from selfmanager.core.config import SelfManagerConfig
from selfmanager.core.exceptions import (
    DataStoreError,
    NetworkError,
    NotFoundError,
    TableMissingError,
)
from selfmanager.core.logger import selfmanager_logger as logger
from selfmanager.storage.backend.table_backend import Row, TableBackend

T = TypeVar('T')

# PostgREST error code for "relation does not exist in the schema cache"
TABLE_MISSING_CODE = 'PGRST205'


def _error_payload(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def raise_for_response(table: str, response: httpx.Response) -> None:
    """Translate an error response into the data store exception taxonomy."""
    if response.is_success:
        return

    payload = _error_payload(response)
    code = payload.get('code')
    message = payload.get('message') or response.text or response.reason_phrase
    detail = f'{table}: HTTP {response.status_code} {message}'

    if code == TABLE_MISSING_CODE:
        raise TableMissingError(detail, code=code)
    if response.status_code >= 500:
        raise NetworkError(detail, code=code)
    if response.status_code == 404:
        raise NotFoundError(detail)
    raise DataStoreError(detail, code=code)


@dataclass
class RestTableBackend(TableBackend):
    """TableBackend talking to ``{base_url}/rest/v1/{table}``.

    Transport failures, timeouts and 5xx responses become ``NetworkError``
    and are retried ``max_retries`` times; every call here is idempotent
    since rows are keyed by client-generated ids.
    """

    base_url: str
    api_key: str
    timeout: float = 10.0
    max_retries: int = 2
    retry_delay: float = 0.25
    transport: httpx.AsyncBaseTransport | None = None
    _client: httpx.AsyncClient | None = field(default=None, init=False, repr=False)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=f'{self.base_url.rstrip("/")}/rest/v1',
                headers={
                    'apikey': self.api_key,
                    'Authorization': f'Bearer {self.api_key}',
                    'Content-Type': 'application/json',
                },
                timeout=self.timeout,
                transport=self.transport,
            )
        return self._client

    async def _with_retries(self, description: str, call: Callable[[], Awaitable[T]]) -> T:
        attempt = 0
        while True:
            try:
                return await call()
            except NetworkError as e:
                if attempt >= self.max_retries:
                    raise
                attempt += 1
                logger.warning(f'{description} failed ({e}), retry {attempt}/{self.max_retries}')
                await asyncio.sleep(self.retry_delay)

    async def _request(self, table: str, method: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._get_client().request(method, f'/{table}', **kwargs)
        except httpx.TransportError as e:
            # Covers connection errors and timeouts
            raise NetworkError(f'{table}: {type(e).__name__}: {e}') from e
        raise_for_response(table, response)
        return response

    async def list_rows(self, table: str, user_id: str) -> list[Row]:
        async def call() -> list[Row]:
            response = await self._request(
                table, 'GET', params={'select': '*', 'user_id': f'eq.{user_id}'}
            )
            data = response.json()
            return data if isinstance(data, list) else []

        try:
            return await self._with_retries(f'Listing {table}', call)
        except NotFoundError as e:
            # A GET on the table itself only 404s when the relation is missing
            raise TableMissingError(str(e)) from e

    async def upsert_row(self, table: str, row: Row) -> Row:
        async def call() -> Row:
            response = await self._request(
                table,
                'POST',
                json=row,
                params={'on_conflict': 'id'},
                headers={'Prefer': 'resolution=merge-duplicates,return=representation'},
            )
            data = response.json() if response.content else None
            if isinstance(data, list) and data:
                return data[0]
            return row

        return await self._with_retries(f'Upserting {table} row {row.get("id")}', call)

    async def delete_row(self, table: str, row_id: str) -> None:
        async def call() -> None:
            await self._request(table, 'DELETE', params={'id': f'eq.{row_id}'})

        await self._with_retries(f'Deleting {table} row {row_id}', call)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @classmethod
    def from_config(cls, config: SelfManagerConfig) -> RestTableBackend:
        if not config.supabase_url:
            raise ValueError('supabase_url is required for the rest data store')
        api_key = config.supabase_key.get_secret_value() if config.supabase_key else ''
        return cls(
            base_url=config.supabase_url,
            api_key=api_key,
            timeout=config.request_timeout,
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
        )
