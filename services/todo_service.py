"""
Todo Service - ownership checks, free-tier quota and persistence for todos
"""

import logging
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from backend.auth.identity import RoleResolver
from backend.auth.policy import authorize, can_create_todo
from backend.auth.user import Action, Actor, Role
from backend.utils.errors import Forbidden, Invalid, NotFound, QuotaExceeded
from crud.todo import TodoRepository
from crud.user import UserRepository
from database_models import Todo

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 500


def clean_title(title: Optional[str]) -> str:
    if title is None:
        raise Invalid("Title is required")
    title = title.strip()
    if not title:
        raise Invalid("Title must not be empty")
    if len(title) > MAX_TITLE_LENGTH:
        raise Invalid(f"Title must be at most {MAX_TITLE_LENGTH} characters")
    return title


class TodoService:
    """
    Service class for todo business logic.

    The actor's role is only looked up when it can change the outcome: on
    admin listings and when the actor touches a todo it does not own.
    """

    def __init__(self, db: AsyncSession, role_resolver: RoleResolver):
        self.db = db
        self.role_resolver = role_resolver
        self.todos = TodoRepository(db)
        self.users = UserRepository(db)

    async def resolve_role(self, actor: Actor) -> Role:
        if actor.role is None:
            actor.role = await self.role_resolver.role_of(actor.user_id)
        return actor.role

    async def _check(self, actor: Actor, owner_id: Optional[str], action: Action) -> None:
        role = Role.MEMBER
        if action == Action.READ_ALL or owner_id != actor.user_id:
            role = await self.resolve_role(actor)
        decision = authorize(role, actor.user_id, owner_id, action)
        if not decision.allowed:
            logger.info(f"Denied {action.value} by {actor.user_id}: {decision.reason}")
            raise Forbidden()

    async def _get_authorized(self, actor: Actor, todo_id: str, action: Action) -> Todo:
        todo = await self.todos.get_todo_by_id(todo_id)
        if todo is None:
            raise NotFound("Todo not found")
        await self._check(actor, todo.user_id, action)
        return todo

    async def require_admin(self, actor: Actor) -> None:
        """Gate for the admin area: same privilege as listing every user's todos."""
        await self._check(actor, None, Action.READ_ALL)

    async def list_todos(self, actor: Actor) -> List[Todo]:
        return await self.todos.list_todos_for_user(actor.user_id)

    async def list_all_todos(self, actor: Actor) -> List[Todo]:
        await self._check(actor, None, Action.READ_ALL)
        return await self.todos.list_all_todos()

    async def get_todo(self, actor: Actor, todo_id: str) -> Todo:
        return await self._get_authorized(actor, todo_id, Action.READ)

    async def create_todo(self, actor: Actor, title: Optional[str]) -> Todo:
        """
        Create a todo under the free-tier quota.

        The owner's row is write-locked before counting, so concurrent creates
        by the same user re-check the quota one after another inside the
        request transaction.
        """
        title = clean_title(title)

        user = await self.users.lock_user(actor.user_id)
        if user is None:
            await self.users.get_or_create_user(actor.user_id)
            user = await self.users.lock_user(actor.user_id)

        count = await self.todos.count_todos_for_user(user.id)
        decision = can_create_todo(user, count)
        if not decision.allowed:
            logger.info(f"Quota reached for {user.id} ({count} todos)")
            raise QuotaExceeded()

        todo = await self.todos.create_todo(user.id, title)
        logger.info(f"Created todo {todo.id} for {user.id}")
        return todo

    async def update_todo(
        self,
        actor: Actor,
        todo_id: str,
        completed: Optional[bool] = None,
        title: Optional[str] = None,
    ) -> Todo:
        updates = {}
        if completed is not None:
            updates["completed"] = completed
        if title is not None:
            updates["title"] = clean_title(title)
        if not updates:
            raise Invalid("Nothing to update")

        todo = await self._get_authorized(actor, todo_id, Action.UPDATE)
        return await self.todos.update_todo(todo, updates)

    async def delete_todo(self, actor: Actor, todo_id: str) -> None:
        await self._get_authorized(actor, todo_id, Action.DELETE)
        if not await self.todos.delete_todo(todo_id):
            raise NotFound("Todo not found")
        logger.info(f"Deleted todo {todo_id} by {actor.user_id}")
