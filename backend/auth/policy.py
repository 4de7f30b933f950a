from typing import Optional

from pydantic import BaseModel

from backend.auth.user import Action, Role, Subscriber


FREE_TIER_TODO_LIMIT = 3

QUOTA_EXCEEDED = "quota_exceeded"
FORBIDDEN = "forbidden"


class Decision(BaseModel):
    allowed: bool
    reason: Optional[str] = None


ALLOW = Decision(allowed=True)


def deny(reason: str) -> Decision:
    return Decision(allowed=False, reason=reason)


def can_create_todo(user: Subscriber, current_todo_count: int) -> Decision:
    """Free-tier gate for todo creation.

    Only the subscription flag is consulted; `subscription_ends` is left to the
    subscription workflow. The caller supplies a freshly read count.
    """
    if user.is_subscribed:
        return ALLOW
    if current_todo_count < FREE_TIER_TODO_LIMIT:
        return ALLOW
    return deny(QUOTA_EXCEEDED)


def authorize(
    actor_role: Role,
    actor_id: str,
    resource_owner_id: Optional[str],
    action: Action,
) -> Decision:
    if actor_role == Role.ADMIN:
        return ALLOW
    if action == Action.READ_ALL:
        return deny(FORBIDDEN)
    if resource_owner_id is not None and actor_id == resource_owner_id:
        return ALLOW
    return deny(FORBIDDEN)
