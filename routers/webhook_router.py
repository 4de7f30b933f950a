"""
Webhook Router - user provisioning events from the identity provider
"""

import hashlib
import hmac
import json
import logging
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from backend.utils.errors import Invalid, Unauthenticated, UpstreamUnavailable
from backend.utils.responses import success_response
from config import settings
from crud.user import UserRepository
from database import get_db

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-webhook-signature"

webhook_router = APIRouter(prefix="/webhook", tags=["webhook"])


def sign_payload(payload: bytes, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def verify_signature(payload: bytes, signature: str, secret: str) -> bool:
    if not signature:
        return False
    return hmac.compare_digest(sign_payload(payload, secret), signature)


@webhook_router.post("/register")
async def register_user(
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    Provision a local user when the identity provider reports `user.created`.

    The raw body must be signed with IDENTITY_WEBHOOK_SECRET (hex HMAC-SHA256
    in X-Webhook-Signature). Replays are harmless: existing users are left as is.
    """
    webhook_secret = settings.identity_webhook_secret
    if not webhook_secret:
        logger.error("IDENTITY_WEBHOOK_SECRET is not set. Rejecting provisioning webhook.")
        raise UpstreamUnavailable("Webhook secret not configured")

    payload = await request.body()
    if not verify_signature(payload, request.headers.get(SIGNATURE_HEADER, ""), webhook_secret):
        logger.warning("Provisioning webhook signature verification failed")
        raise Unauthenticated("Invalid webhook signature")

    try:
        event = json.loads(payload)
    except ValueError:
        raise Invalid("Invalid payload format")
    if not isinstance(event, dict):
        raise Invalid("Invalid payload format")

    event_type = event.get("type")
    if event_type != "user.created":
        logger.info(f"Ignoring identity provider event: {event_type}")
        return success_response({"received": True, "event_type": event_type})

    data = event.get("data") or {}
    user_id = data.get("id") if isinstance(data, dict) else None
    if not user_id or not isinstance(user_id, str):
        raise Invalid("Event is missing the user id")

    user = await UserRepository(db).get_or_create_user(user_id)
    logger.info(f"Provisioned user {user.id}")
    return success_response(
        {"received": True, "event_type": event_type, "user_id": user.id},
        message="User provisioned",
    )
