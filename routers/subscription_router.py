"""
Subscription Router - read and start the caller's subscription
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auth import get_current_actor
from backend.auth.user import Actor
from crud.user import UserRepository
from database import get_db
from models.user import SubscriptionOut
from services.subscription_service import SubscriptionService

subscription_router = APIRouter(prefix="/subscription", tags=["subscription"])


@subscription_router.get("", response_model=SubscriptionOut)
async def get_subscription(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    user_repo = UserRepository(db)
    user = await user_repo.get_user_by_id(actor.user_id)
    return SubscriptionService(db, user_repo).get_status(user)


@subscription_router.post("", response_model=SubscriptionOut)
async def start_subscription(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Mark the caller as subscribed for one subscription period"""
    user_repo = UserRepository(db)
    user = await user_repo.get_user_by_id(actor.user_id)
    return await SubscriptionService(db, user_repo).subscribe(user)
