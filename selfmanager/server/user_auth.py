"""Resolves the current user from a request.

There is always a user: requests without a session, or whose session cannot
be verified, are scoped to the anonymous sentinel user.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import httpx
from fastapi import Request

from selfmanager.core.config import SelfManagerConfig
from selfmanager.core.logger import selfmanager_logger as logger

ANONYMOUS_USER_ID = 'anonymous'


class AuthProvider(ABC):
    @abstractmethod
    async def current_user_id(self, access_token: str | None) -> str:
        """Return the user id for a session token, or ANONYMOUS_USER_ID."""


class AnonymousAuthProvider(AuthProvider):
    async def current_user_id(self, access_token: str | None) -> str:
        return ANONYMOUS_USER_ID


@dataclass
class SupabaseAuthProvider(AuthProvider):
    """Looks the token up with ``GET {base_url}/auth/v1/user``."""

    base_url: str
    api_key: str
    timeout: float = 10.0
    transport: httpx.AsyncBaseTransport | None = None

    async def current_user_id(self, access_token: str | None) -> str:
        if not access_token:
            return ANONYMOUS_USER_ID
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(
                    f'{self.base_url.rstrip("/")}/auth/v1/user',
                    headers={
                        'apikey': self.api_key,
                        'Authorization': f'Bearer {access_token}',
                    },
                )
                response.raise_for_status()
                user_id = response.json().get('id')
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f'Auth error, using anonymous user: {e}')
            return ANONYMOUS_USER_ID
        return user_id or ANONYMOUS_USER_ID


def get_auth_provider(config: SelfManagerConfig) -> AuthProvider:
    if config.supabase_url:
        api_key = config.supabase_key.get_secret_value() if config.supabase_key else ''
        return SupabaseAuthProvider(
            base_url=config.supabase_url,
            api_key=api_key,
            timeout=config.request_timeout,
        )
    return AnonymousAuthProvider()


def get_access_token(request: Request) -> str | None:
    authorization = request.headers.get('Authorization', '')
    scheme, _, token = authorization.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


async def get_user_id(request: Request) -> str:
    """FastAPI dependency returning the current user id."""
    from selfmanager.server.shared import auth_provider

    return await auth_provider.current_user_id(get_access_token(request))
