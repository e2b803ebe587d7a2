import hashlib
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from nerdiversary.utils.timezone import utc_now
from .models import FamilyMember, NotificationLog, Subscription

logger = logging.getLogger(__name__)

MemberRow = Tuple[FamilyMember, Subscription]


def subscription_id_for(endpoint: str) -> str:
    """Stable subscription id: sha256 hex digest of the push endpoint."""
    return hashlib.sha256(endpoint.encode("utf-8")).hexdigest()


def get_subscription(db: Session, subscription_id: str) -> Optional[Subscription]:
    return db.get(Subscription, subscription_id)


def upsert_subscription(
    db: Session,
    endpoint: str,
    p256dh: str,
    auth: str,
    lead_minutes: Sequence[int],
) -> Subscription:
    """Insert or update a subscription row. The caller owns the transaction."""
    subscription_id = subscription_id_for(endpoint)
    subscription = db.get(Subscription, subscription_id)
    if subscription is None:
        subscription = Subscription(id=subscription_id, endpoint=endpoint)
        db.add(subscription)
    subscription.p256dh = p256dh
    subscription.auth = auth
    subscription.enabled_lead_minutes = sorted(set(lead_minutes), reverse=True)
    subscription.updated_at = utc_now()
    db.flush()
    return subscription


def replace_family_members(
    db: Session,
    subscription_id: str,
    members: Iterable[Tuple[str, str]],
) -> List[FamilyMember]:
    """Delete-then-insert the member set of one subscription. The caller owns the transaction."""
    db.execute(delete(FamilyMember).where(FamilyMember.subscription_id == subscription_id))
    rows = [
        FamilyMember(subscription_id=subscription_id, name=name, birth_datetime=birth_datetime)
        for name, birth_datetime in members
    ]
    db.add_all(rows)
    db.flush()
    return rows


def save_subscription(
    db: Session,
    endpoint: str,
    p256dh: str,
    auth: str,
    lead_minutes: Sequence[int],
    members: Iterable[Tuple[str, str]],
) -> Subscription:
    """Upsert a subscription and replace its family in one transaction."""
    try:
        subscription = upsert_subscription(db, endpoint, p256dh, auth, lead_minutes)
        replace_family_members(db, subscription.id, members)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(subscription)
    return subscription


def delete_subscription(db: Session, subscription_id: str) -> bool:
    db.execute(delete(FamilyMember).where(FamilyMember.subscription_id == subscription_id))
    result = db.execute(delete(Subscription).where(Subscription.id == subscription_id))
    db.commit()
    return result.rowcount > 0


def delete_subscription_by_endpoint(db: Session, endpoint: str) -> bool:
    return delete_subscription(db, subscription_id_for(endpoint))


def find_members_by_birth_datetimes(db: Session, keys: Sequence[str]) -> List[MemberRow]:
    """One ``birth_datetime IN (...)`` query joined to subscriptions."""
    if not keys:
        return []
    stmt = (
        select(FamilyMember, Subscription)
        .join(Subscription, FamilyMember.subscription_id == Subscription.id)
        .where(FamilyMember.birth_datetime.in_(list(keys)))
    )
    return [(member, subscription) for member, subscription in db.execute(stmt).all()]


def find_members_by_birth_times(db: Session, times_of_day: Sequence[str]) -> List[MemberRow]:
    """Members whose stored birth time of day (``HH:MM``) is one of ``times_of_day``."""
    if not times_of_day:
        return []
    stmt = (
        select(FamilyMember, Subscription)
        .join(Subscription, FamilyMember.subscription_id == Subscription.id)
        .where(func.substr(FamilyMember.birth_datetime, 12, 5).in_(list(times_of_day)))
    )
    return [(member, subscription) for member, subscription in db.execute(stmt).all()]


def log_notification(
    db: Session,
    subscription_id: str,
    person_name: Optional[str],
    title: str,
    body: str,
    event_id: Optional[str] = None,
    lead_minutes: Optional[int] = None,
) -> NotificationLog:
    entry = NotificationLog(
        subscription_id=subscription_id,
        person_name=person_name,
        event_id=event_id,
        lead_minutes=lead_minutes,
        title=title,
        body=body,
    )
    db.add(entry)
    db.commit()
    return entry
