"""
Offset-indexed notification scheduler.

A tick never walks the subscriber population. It works backwards from "now":
for every (offset, lead) pair the only birth instant that has that milestone
due ``lead`` minutes from now is ``now - offset + lead``. Those instants,
truncated to the minute, are looked up in batches with an indexed
``birth_datetime IN (...)`` query, so the store work per tick depends on the
size of the offset table and the lead set, not on the number of subscribers.

Calendar-recurring milestones (birthdays, Pi Day, ...) have no fixed offset.
They are resolved in a second pass that selects members by birth time of day
and re-runs the calendar generators for each distinct birth instant found.
"""
import logging
import math
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Dict, Iterable, Iterator, List, Optional, Protocol, Sequence, Tuple, TypeVar

from sqlalchemy.orm import Session

from nerdiversary.milestones.engine import calculate
from nerdiversary.milestones.generators import CALENDAR_GENERATORS
from nerdiversary.milestones.kinds import MilestoneEvent
from nerdiversary.milestones.offsets import Offset, OffsetTable
from nerdiversary.utils.timezone import (
    format_birth_datetime,
    parse_birth_datetime,
    time_of_day_key,
    to_utc_aware,
    truncate_to_minute,
)
from . import repository
from .formatting import format_notification_body, format_notification_title
from .models import FamilyMember, Subscription

logger = logging.getLogger(__name__)

T = TypeVar("T")

TargetDatetimeMap = Dict[str, List[Tuple[Offset, int]]]


@dataclass
class PendingNotification:
    subscription_id: str
    endpoint: str
    p256dh: str
    auth: str
    person_name: str
    event_id: str
    title: str
    body: str
    icon: str
    lead_minutes: int
    event_at: Optional[datetime] = None

    def payload(self, url: Optional[str] = None) -> dict:
        """JSON body delivered to the service worker."""
        data = {
            "title": self.title,
            "body": self.body,
            "icon": self.icon,
            "tag": f"{self.event_id}-{self.lead_minutes}",
            "eventId": self.event_id,
            "eventDate": self.event_at.isoformat() if self.event_at else None,
        }
        if url:
            data["url"] = url
        return data

    def to_dict(self) -> dict:
        data = asdict(self)
        data["event_at"] = self.event_at.isoformat() if self.event_at else None
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "PendingNotification":
        values = dict(data)
        if values.get("event_at"):
            values["event_at"] = datetime.fromisoformat(values["event_at"])
        return cls(**values)


class SentLedger(Protocol):
    def claim(self, subscription_id: str, event_id: str, lead_minutes: int) -> bool:
        """Record the triple; return False when it was already recorded."""


class RedisSentLedger:
    """Cross-tick record of sent notifications backed by ``SET NX EX``."""

    def __init__(self, client, ttl_seconds: int, prefix: str = "nerdiversary:sent"):
        self.client = client
        self.ttl_seconds = ttl_seconds
        self.prefix = prefix

    def key(self, subscription_id: str, event_id: str, lead_minutes: int) -> str:
        return f"{self.prefix}:{subscription_id}:{event_id}:{lead_minutes}"

    def claim(self, subscription_id: str, event_id: str, lead_minutes: int) -> bool:
        key = self.key(subscription_id, event_id, lead_minutes)
        return bool(self.client.set(key, "1", nx=True, ex=self.ttl_seconds))


def chunk(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    if size <= 0:
        raise ValueError("Batch size must be positive")
    for start in range(0, len(items), size):
        yield items[start:start + size]


def compute_target(now: datetime, offset: Offset, lead_minutes: int) -> datetime:
    """Birth instant whose milestone ``offset`` falls ``lead_minutes`` after ``now``."""
    return to_utc_aware(now) - timedelta(milliseconds=offset.elapsed_ms) + timedelta(minutes=lead_minutes)


def build_target_map(offset_table: OffsetTable, lead_minutes: Iterable[int], now: datetime) -> TargetDatetimeMap:
    targets: TargetDatetimeMap = {}
    leads = list(lead_minutes)
    for offset in offset_table:
        for lead in leads:
            key = format_birth_datetime(compute_target(now, offset, lead))
            pairs = targets.setdefault(key, [])
            if (offset, lead) not in pairs:
                pairs.append((offset, lead))
    return targets


def _enabled_leads(subscription: Subscription) -> set:
    return set(subscription.enabled_lead_minutes or ())


class NotificationScheduler:
    """
    Computes the notifications due for one tick.

    The scheduler only reads from the store; delivery is left to the caller.
    """

    def __init__(
        self,
        offset_table: OffsetTable,
        lead_minutes: Sequence[int],
        batch_size: int,
        ledger: Optional[SentLedger] = None,
        horizon_years: int = 120,
    ):
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self.offset_table = offset_table
        self.lead_minutes = sorted(set(lead_minutes), reverse=True)
        self.batch_size = batch_size
        self.ledger = ledger
        self.horizon_years = horizon_years

    def run_tick(self, db: Session, now: datetime) -> List[PendingNotification]:
        now = to_utc_aware(now)
        notifications = self._offset_pass(db, now)
        notifications.extend(self._calendar_pass(db, now))
        logger.info(
            f"🕐 [Scheduler] Tick {now.isoformat()} produced {len(notifications)} notification(s)"
        )
        return notifications

    def _offset_pass(self, db: Session, now: datetime) -> List[PendingNotification]:
        targets = build_target_map(self.offset_table, self.lead_minutes, now)
        keys = sorted(targets)
        batches = math.ceil(len(keys) / self.batch_size) if keys else 0
        logger.debug(f"🔍 [Scheduler] {len(keys)} target datetimes in {batches} batch(es)")

        notifications: List[PendingNotification] = []
        for batch in chunk(keys, self.batch_size):
            for member, subscription in repository.find_members_by_birth_datetimes(db, batch):
                enabled = _enabled_leads(subscription)
                birth = parse_birth_datetime(member.birth_datetime)
                for offset, lead in targets.get(member.birth_datetime, []):
                    if lead not in enabled:
                        continue
                    notification = self._emit(
                        member, subscription, offset.event_id, offset.label, offset.icon, lead,
                        birth + timedelta(milliseconds=offset.elapsed_ms),
                    )
                    if notification:
                        notifications.append(notification)
        return notifications

    def _calendar_pass(self, db: Session, now: datetime) -> List[PendingNotification]:
        candidates: Dict[int, datetime] = {
            lead: truncate_to_minute(now + timedelta(minutes=lead)) for lead in self.lead_minutes
        }
        times_of_day = sorted({time_of_day_key(instant) for instant in candidates.values()})
        rows = repository.find_members_by_birth_times(db, times_of_day)

        events_by_birth: Dict[str, List[MilestoneEvent]] = {}
        notifications: List[PendingNotification] = []
        for member, subscription in rows:
            if member.birth_datetime not in events_by_birth:
                try:
                    events_by_birth[member.birth_datetime] = calculate(
                        parse_birth_datetime(member.birth_datetime),
                        horizon_years=self.horizon_years,
                        generators=CALENDAR_GENERATORS,
                    )
                except ValueError as e:  # InvalidInput or a corrupt stored key
                    logger.error(f"❌ [Scheduler] Skipping calendar milestones for birth {member.birth_datetime}: {e}")
                    events_by_birth[member.birth_datetime] = []
            events = events_by_birth[member.birth_datetime]
            enabled = _enabled_leads(subscription)
            for lead, instant in candidates.items():
                if lead not in enabled:
                    continue
                for event in events:
                    if event.date != instant:
                        continue
                    notification = self._emit(
                        member, subscription, event.id, event.title, event.icon, lead, event.date,
                    )
                    if notification:
                        notifications.append(notification)
        return notifications

    def _emit(
        self,
        member: FamilyMember,
        subscription: Subscription,
        event_id: str,
        label: str,
        icon: str,
        lead: int,
        event_at: datetime,
    ) -> Optional[PendingNotification]:
        ledger_event = f"{event_id}@{member.birth_datetime}"
        if self.ledger is not None and not self.ledger.claim(subscription.id, ledger_event, lead):
            logger.debug(f"⏭️ [Scheduler] Already sent {event_id}/{lead} to {subscription.id[:12]}")
            return None
        return PendingNotification(
            subscription_id=subscription.id,
            endpoint=subscription.endpoint,
            p256dh=subscription.p256dh,
            auth=subscription.auth,
            person_name=member.name,
            event_id=event_id,
            title=format_notification_title(icon, lead),
            body=format_notification_body(member.name, label),
            icon=icon,
            lead_minutes=lead,
            event_at=event_at,
        )
