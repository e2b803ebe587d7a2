import logging
from datetime import datetime
from typing import List, Tuple

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from nerdiversary.db.session import get_db
from nerdiversary.milestones.engine import InvalidInput, horizon_cutoff
from nerdiversary.milestones.family import parse_family_param
from nerdiversary.utils.timezone import format_birth_datetime, to_utc_aware
from .config import settings
from .metrics import subscriptions_created_total, subscriptions_removed_total
from .repository import delete_subscription_by_endpoint, save_subscription
from .schemas import (
    SubscribeRequest,
    SubscribeResponse,
    UnsubscribeRequest,
    UnsubscribeResponse,
    VapidPublicKeyResponse,
)
from .webpush import WebPushError, load_vapid_private_key, vapid_public_key

logger = logging.getLogger(__name__)

router = APIRouter()


def _checked_birth(name: str, birth: datetime) -> str:
    try:
        horizon_cutoff(birth, settings.HORIZON_YEARS)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=f"Unsupported birth date for {name!r}: {e}")
    return format_birth_datetime(birth)


def _family_rows(family) -> List[Tuple[str, str]]:
    if isinstance(family, str):
        return [(entry.name, _checked_birth(entry.name, entry.birth)) for entry in parse_family_param(family)]
    rows = []
    for member in family:
        try:
            birth = to_utc_aware(datetime.fromisoformat(member.birth_datetime))
        except (ValueError, OverflowError):
            raise HTTPException(status_code=400, detail=f"Invalid birthDatetime for {member.name!r}")
        rows.append((member.name, _checked_birth(member.name, birth)))
    return rows


@router.get("/vapid-public-key", response_model=VapidPublicKeyResponse)
def get_vapid_public_key():
    if settings.VAPID_PUBLIC_KEY:
        return VapidPublicKeyResponse(public_key=settings.VAPID_PUBLIC_KEY)
    if settings.VAPID_PRIVATE_KEY:
        try:
            return VapidPublicKeyResponse(public_key=vapid_public_key(load_vapid_private_key(settings.VAPID_PRIVATE_KEY)))
        except WebPushError as e:
            logger.error(f"❌ [Subscribe] Invalid VAPID private key: {e}")
    raise HTTPException(status_code=503, detail="Push notifications are not configured")


@router.post("/subscribe", response_model=SubscribeResponse)
def subscribe(payload: SubscribeRequest, db: Session = Depends(get_db)):
    """Create or replace a push subscription and the family it follows."""
    members = _family_rows(payload.family)
    if not members:
        raise HTTPException(status_code=400, detail="No valid family members")

    configured = set(settings.LEAD_MINUTES)
    lead_minutes = payload.lead_minutes if payload.lead_minutes is not None else sorted(configured, reverse=True)
    if not lead_minutes:
        raise HTTPException(status_code=400, detail="At least one lead time is required")
    unsupported = sorted(set(lead_minutes) - configured)
    if unsupported:
        raise HTTPException(status_code=400, detail=f"Unsupported lead times: {unsupported}")

    subscription = save_subscription(
        db,
        endpoint=payload.subscription.endpoint,
        p256dh=payload.subscription.keys.p256dh,
        auth=payload.subscription.keys.auth,
        lead_minutes=lead_minutes,
        members=members,
    )
    subscriptions_created_total.inc()
    logger.info(f"✅ [Subscribe] {subscription.id[:12]} with {len(members)} member(s), leads {subscription.enabled_lead_minutes}")
    return SubscribeResponse(
        subscription_id=subscription.id,
        members=len(members),
        lead_minutes=subscription.enabled_lead_minutes,
    )


@router.post("/unsubscribe", response_model=UnsubscribeResponse)
def unsubscribe(payload: UnsubscribeRequest, db: Session = Depends(get_db)):
    removed = delete_subscription_by_endpoint(db, payload.endpoint)
    if removed:
        subscriptions_removed_total.inc()
    logger.info(f"🗑️ [Subscribe] Unsubscribe for endpoint {payload.endpoint[:60]} removed={removed}")
    return UnsubscribeResponse(success=True, removed=removed)
