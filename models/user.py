from datetime import datetime
from typing import Optional

from backend.auth.user import Role
from models.todo import CamelModel


class SubscriptionOut(CamelModel):
    is_subscribed: bool = False
    subscription_ends: Optional[datetime] = None


class AccountOut(SubscriptionOut):
    user_id: str
    role: Role = Role.MEMBER
    todo_count: int = 0
    free_tier_limit: int
