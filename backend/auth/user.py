from datetime import datetime
from enum import Enum
from typing import Optional, Protocol

from pydantic import BaseModel


class Role(str, Enum):
    MEMBER = "member"
    ADMIN = "admin"


class Action(str, Enum):
    READ = "read"
    READ_ALL = "read_all"
    UPDATE = "update"
    DELETE = "delete"


class Subscriber(Protocol):
    is_subscribed: bool
    subscription_ends: Optional[datetime]


class SubscriptionState(BaseModel):
    is_subscribed: bool = False
    subscription_ends: Optional[datetime] = None


class Actor(BaseModel):
    """The authenticated caller. `role` stays None until someone resolves it."""
    user_id: str
    role: Optional[Role] = None
