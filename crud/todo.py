"""
TodoRepository for database operations on Todo model
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import delete, func, select
from database_models import Todo


class TodoRepository:
    """
    Repository class for Todo database operations.
    Listings are always newest first.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_todo_by_id(self, todo_id: str) -> Optional[Todo]:
        result = await self.db.execute(
            select(Todo).where(Todo.id == todo_id)
        )
        return result.scalar_one_or_none()

    async def list_todos_for_user(self, user_id: str) -> List[Todo]:
        result = await self.db.execute(
            select(Todo)
            .where(Todo.user_id == user_id)
            .order_by(Todo.created_at.desc(), Todo.id.desc())
        )
        return list(result.scalars().all())

    async def list_all_todos(self) -> List[Todo]:
        result = await self.db.execute(
            select(Todo).order_by(Todo.created_at.desc(), Todo.id.desc())
        )
        return list(result.scalars().all())

    async def count_todos_for_user(self, user_id: str) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Todo).where(Todo.user_id == user_id)
        )
        return int(result.scalar_one())

    async def create_todo(self, user_id: str, title: str) -> Todo:
        """
        Insert a todo for an existing user.

        Args:
            user_id: Owner id (must reference an existing users row)
            title: Already validated title

        Returns:
            Created Todo object
        """
        todo = Todo(user_id=user_id, title=title, completed=False)
        self.db.add(todo)
        await self.db.flush()
        await self.db.refresh(todo)
        return todo

    async def update_todo(self, todo: Todo, updates: dict) -> Todo:
        """
        Update todo fields.

        Args:
            todo: Todo object to update
            updates: Fields to change; only `title` and `completed` are mutable

        Returns:
            Updated Todo object
        """
        for key in ("title", "completed"):
            if key in updates:
                setattr(todo, key, updates[key])

        await self.db.flush()
        await self.db.refresh(todo)
        return todo

    async def delete_todo(self, todo_id: str) -> bool:
        """Delete a todo by id. Returns False when nothing was deleted."""
        result = await self.db.execute(
            delete(Todo).where(Todo.id == todo_id)
        )
        await self.db.flush()
        return result.rowcount > 0
