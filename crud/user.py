"""
UserRepository for database operations on User model
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from database_models import User, utcnow


class UserRepository:
    """
    Repository class for User database operations.
    Encapsulates all database logic for the User model.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the repository with a database session.

        Args:
            db: AsyncSession instance for database operations
        """
        self.db = db

    async def get_user_by_id(self, user_id: str, for_update: bool = False) -> Optional[User]:
        """
        Retrieve a user by identity-provider id.

        Args:
            user_id: User's ID
            for_update: Take a row lock until the transaction ends and
                reload the row even if it is already in the session

        Returns:
            User object if found, None otherwise
        """
        stmt = select(User).where(User.id == user_id)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def lock_user(self, user_id: str) -> Optional[User]:
        """
        Take the write lock on a user's row and re-read it under that lock.

        SQLite ignores FOR UPDATE and only opens a write transaction on the
        first write, so a no-op UPDATE goes first. On Postgres the same
        statement takes the row lock.

        Returns:
            User object if found, None otherwise
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(is_subscribed=User.is_subscribed)
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(stmt)
        return await self.get_user_by_id(user_id, for_update=True)

    async def create_user(self, user_id: str) -> User:
        """
        Create a new, unsubscribed user.

        Args:
            user_id: Identity-provider user id

        Returns:
            Created User object
        """
        user = User(id=user_id, is_subscribed=False, subscription_ends=None)
        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user)
        return user

    async def get_or_create_user(self, user_id: str) -> User:
        """
        Return the user, inserting an unsubscribed row first if none exists.

        Concurrent first requests for the same user all succeed: the insert
        skips a row another transaction already created.
        """
        user = await self.get_user_by_id(user_id)
        if user is not None:
            return user

        if self.db.get_bind().dialect.name == "postgresql":
            insert = postgresql_insert
        else:
            insert = sqlite_insert
        stmt = (
            insert(User)
            .values(id=user_id, is_subscribed=False, subscription_ends=None, created_at=utcnow())
            .on_conflict_do_nothing(index_elements=[User.id])
        )
        await self.db.execute(stmt)
        return await self.get_user_by_id(user_id)

    async def update_subscription(
        self,
        user: User,
        is_subscribed: bool,
        subscription_ends: Optional[datetime],
    ) -> User:
        user.is_subscribed = is_subscribed
        user.subscription_ends = subscription_ends
        await self.db.flush()
        await self.db.refresh(user)
        return user
