"""
Role resolution against the identity provider.

The provider is the source of truth for roles: a user is an admin only when
the provider's stored `public_metadata.role` claim says "admin".
"""

import logging
from typing import Iterable, Optional, Protocol

import httpx

from backend.auth.user import Role
from backend.utils.errors import IdentityProviderUnavailable

logger = logging.getLogger(__name__)


class RoleResolver(Protocol):
    async def role_of(self, user_id: str) -> Role:
        ...


class StaticRoleResolver:
    """Admins come from a fixed id list (ADMIN_USER_IDS)."""

    def __init__(self, admin_ids: Iterable[str] = ()):
        self.admin_ids = frozenset(admin_ids)

    async def role_of(self, user_id: str) -> Role:
        return Role.ADMIN if user_id in self.admin_ids else Role.MEMBER


class IdentityProviderRoleResolver:
    """
    Looks up the user's role claim over the provider's backend API.

    Any transport failure, timeout, 5xx or unreadable body raises
    IdentityProviderUnavailable so callers can tell it apart from a missing
    session.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout_seconds: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self._client = client

    def _headers(self) -> dict:
        if not self.api_key:
            return {}
        return {"Authorization": f"Bearer {self.api_key}"}

    async def _get_user(self, client: httpx.AsyncClient, user_id: str) -> httpx.Response:
        return await client.get(
            f"{self.base_url}/users/{user_id}",
            headers=self._headers(),
            timeout=self.timeout_seconds,
        )

    async def role_of(self, user_id: str) -> Role:
        try:
            if self._client is not None:
                response = await self._get_user(self._client, user_id)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._get_user(client, user_id)
        except httpx.TimeoutException as e:
            logger.warning(f"Identity provider timed out resolving role for {user_id}: {e}")
            raise IdentityProviderUnavailable() from e
        except httpx.HTTPError as e:
            logger.warning(f"Identity provider request failed for {user_id}: {e}")
            raise IdentityProviderUnavailable() from e

        if response.status_code == 404:
            return Role.MEMBER
        if response.status_code >= 400:
            logger.warning(
                f"Identity provider returned {response.status_code} resolving role for {user_id}"
            )
            raise IdentityProviderUnavailable()

        try:
            body = response.json()
        except ValueError as e:
            logger.warning(f"Identity provider returned an unreadable body for {user_id}")
            raise IdentityProviderUnavailable() from e

        metadata = body.get("public_metadata") if isinstance(body, dict) else None
        if isinstance(metadata, dict) and metadata.get("role") == Role.ADMIN.value:
            return Role.ADMIN
        return Role.MEMBER
