"""
Authentication routes and dependencies
"""

import logging
from typing import Optional
from fastapi import APIRouter, Header, Depends, Cookie
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from crud.todo import TodoRepository
from crud.user import UserRepository
from auth_utils import decode_jwt
from backend.auth.identity import IdentityProviderRoleResolver, RoleResolver, StaticRoleResolver
from backend.auth.policy import FREE_TIER_TODO_LIMIT
from backend.auth.user import Actor
from backend.utils.errors import Unauthenticated
from models.user import AccountOut
from services.todo_service import TodoService
from config import settings

logger = logging.getLogger(__name__)

AUTH_COOKIE_NAME = "auth_token"

# Create auth router
auth_router = APIRouter(tags=["auth"])


def extract_token(auth_token: Optional[str], authorization: Optional[str]) -> Optional[str]:
    """Cookie first (browser sessions), then `Authorization: Bearer` (API clients)."""
    if auth_token:
        return auth_token
    if authorization and authorization.startswith("Bearer "):
        return authorization[len("Bearer "):].strip() or None
    return None


def authenticate(auth_token: Optional[str], authorization: Optional[str]) -> str:
    """Resolve a request's credentials to the identity-provider user id."""
    token = extract_token(auth_token, authorization)
    if not token:
        raise Unauthenticated("Missing authentication token")

    payload = decode_jwt(token)
    if not payload:
        raise Unauthenticated("Invalid or expired token")

    user_id = payload.get("sub")
    if not user_id or not isinstance(user_id, str):
        raise Unauthenticated("Invalid token payload")

    return user_id


# Dependency for protected routes
async def get_current_actor(
    auth_token: Optional[str] = Cookie(None),
    authorization: Optional[str] = Header(None, alias="Authorization"),
    db: AsyncSession = Depends(get_db)
) -> Actor:
    """
    Dependency function to get the authenticated caller.

    The local user row is created on first authenticated access so every
    todo written afterwards references an existing user.
    """
    user_id = authenticate(auth_token, authorization)
    await UserRepository(db).get_or_create_user(user_id)
    return Actor(user_id=user_id)


def get_role_resolver() -> RoleResolver:
    """Identity provider when configured, otherwise the ADMIN_USER_IDS list."""
    if settings.identity_provider_api_url:
        return IdentityProviderRoleResolver(
            base_url=settings.identity_provider_api_url,
            api_key=settings.identity_provider_api_key,
            timeout_seconds=settings.identity_provider_timeout_seconds,
        )
    return StaticRoleResolver(settings.admin_ids)


def get_todo_service(
    db: AsyncSession = Depends(get_db),
    role_resolver: RoleResolver = Depends(get_role_resolver),
) -> TodoService:
    return TodoService(db, role_resolver)


async def require_admin(
    actor: Actor = Depends(get_current_actor),
    todo_service: TodoService = Depends(get_todo_service),
) -> Actor:
    await todo_service.require_admin(actor)
    return actor


@auth_router.get("/me", response_model=AccountOut)
async def get_current_user_info(
    actor: Actor = Depends(get_current_actor),
    todo_service: TodoService = Depends(get_todo_service),
    db: AsyncSession = Depends(get_db)
):
    """Current user's role, subscription state and free-tier usage"""
    user = await UserRepository(db).get_user_by_id(actor.user_id)
    role = await todo_service.resolve_role(actor)
    count = await TodoRepository(db).count_todos_for_user(actor.user_id)
    return AccountOut(
        user_id=actor.user_id,
        role=role,
        is_subscribed=bool(user.is_subscribed),
        subscription_ends=user.subscription_ends,
        todo_count=count,
        free_tier_limit=FREE_TIER_TODO_LIMIT,
    )
