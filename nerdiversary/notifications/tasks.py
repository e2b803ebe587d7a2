import logging
from datetime import datetime
from typing import Callable, Optional

import redis
from celery import shared_task
from redis.exceptions import LockError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from nerdiversary.core.database_utils import get_db_session, ping_database
from nerdiversary.core.redis import get_redis_client
from nerdiversary.db.session import SessionLocal
from nerdiversary.milestones.offsets import get_offset_table
from nerdiversary.utils.timezone import utc_now
from .config import settings
from .dispatcher import deliver_notification
from .metrics import notifications_emitted_total, scheduler_ticks_skipped_total, scheduler_ticks_total
from .scheduler import NotificationScheduler, PendingNotification, RedisSentLedger

logger = logging.getLogger(__name__)

TICK_LEASE_NAME = "nerdiversary:tick-lease"


def build_scheduler() -> NotificationScheduler:
    ledger = None
    if settings.SENT_LEDGER_ENABLED:
        ledger = RedisSentLedger(get_redis_client(), ttl_seconds=settings.SENT_LEDGER_TTL_SECONDS)
    return NotificationScheduler(
        get_offset_table(),
        lead_minutes=settings.LEAD_MINUTES,
        batch_size=settings.QUERY_BATCH_SIZE,
        ledger=ledger,
        horizon_years=settings.HORIZON_YEARS,
    )


def run_scheduler_tick(
    db: Session,
    scheduler: NotificationScheduler,
    now: datetime,
    enqueue: Callable[[PendingNotification], None],
) -> int:
    """Run one tick against ``db`` and hand every notification to ``enqueue``.

    An unreachable store aborts the tick and returns 0.
    """
    try:
        ping_database(db)
    except SQLAlchemyError as e:
        scheduler_ticks_skipped_total.inc()
        logger.error(f"❌ [Scheduler] Subscriber store unavailable, skipping tick: {e}")
        return 0

    scheduler_ticks_total.inc()
    notifications = scheduler.run_tick(db, now)
    for notification in notifications:
        enqueue(notification)
    notifications_emitted_total.inc(len(notifications))
    return len(notifications)


def _enqueue_dispatch(notification: PendingNotification) -> None:
    dispatch_task.delay(notification.to_dict())


@shared_task(name="nerdiversary.tick")
def tick_task(now: Optional[str] = None) -> int:
    """Scheduler tick guarded by a Redis lease. Returns number of notifications enqueued."""
    lease = get_redis_client().lock(TICK_LEASE_NAME, timeout=settings.TICK_LEASE_SECONDS)
    try:
        acquired = lease.acquire(blocking=False)
    except redis.RedisError as e:
        scheduler_ticks_skipped_total.inc()
        logger.error(f"❌ [Scheduler] Could not take tick lease: {e}")
        return 0
    if not acquired:
        scheduler_ticks_skipped_total.inc()
        logger.warning("⏭️ [Scheduler] Previous tick still running, skipping")
        return 0

    db: Session = SessionLocal()
    try:
        tick_at = datetime.fromisoformat(now) if now else utc_now()
        return run_scheduler_tick(db, build_scheduler(), tick_at, _enqueue_dispatch)
    finally:
        db.close()
        try:
            lease.release()
        except LockError:
            logger.warning("⚠️ [Scheduler] Tick lease expired before the tick finished")


@shared_task(name="nerdiversary.dispatch")
def dispatch_task(notification: dict) -> bool:
    """Deliver one notification produced by a tick."""
    pending = PendingNotification.from_dict(notification)
    with get_db_session() as db:
        result = deliver_notification(db, pending)
    return result.success
