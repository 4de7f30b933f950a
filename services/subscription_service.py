"""
Subscription Service for the paid tier (flag + expiry timestamp)
"""
import logging
from datetime import datetime, timedelta, timezone
from sqlalchemy.ext.asyncio import AsyncSession

from backend.auth.user import SubscriptionState
from config import settings
from crud.user import UserRepository
from database_models import User

logger = logging.getLogger(__name__)


class SubscriptionService:
    """
    Service for reading and starting subscriptions.
    No payment processing happens here; subscribing sets the flag and
    pushes the expiry one period into the future.
    """

    def __init__(self, db: AsyncSession, user_repo: UserRepository):
        """
        Initialize the subscription service with database session and user repository.

        Args:
            db: AsyncSession instance for database operations
            user_repo: UserRepository instance for user operations
        """
        self.db = db
        self.user_repo = user_repo

    def get_status(self, user: User) -> SubscriptionState:
        """
        Report the stored subscription state.

        An expiry in the past is reported as stored and is not folded into
        `is_subscribed`.
        """
        return SubscriptionState(
            is_subscribed=bool(user.is_subscribed),
            subscription_ends=user.subscription_ends,
        )

    async def subscribe(self, user: User) -> SubscriptionState:
        """
        Start (or renew) a subscription for a user.

        Args:
            user: User object to subscribe

        Returns:
            The updated subscription state
        """
        ends = datetime.now(timezone.utc) + timedelta(days=settings.subscription_period_days)
        await self.user_repo.update_subscription(user, is_subscribed=True, subscription_ends=ends)
        logger.info(f"Subscription started for {user.id}, ends {ends.isoformat()}")
        return self.get_status(user)
