import logging
from typing import Optional

from sqlalchemy.orm import Session

from .config import settings
from .metrics import (
    push_dispatch_failed_total,
    push_dispatch_success_total,
    stale_subscriptions_purged_total,
)
from .repository import delete_subscription, log_notification
from .scheduler import PendingNotification
from .webpush import DeliveryResult, WebPushError, WebPushSender

logger = logging.getLogger(__name__)

_sender: Optional[WebPushSender] = None


def get_sender() -> Optional[WebPushSender]:
    """Process-wide sender built from PUSH_* settings; None when VAPID is not configured."""
    global _sender
    if _sender is not None:
        return _sender
    if not settings.VAPID_PRIVATE_KEY:
        logger.warning("⚠️ [Dispatch] No VAPID private key configured - push delivery is disabled")
        return None
    try:
        _sender = WebPushSender(
            settings.VAPID_PRIVATE_KEY,
            subject=settings.VAPID_SUBJECT,
            ttl=settings.TTL_SECONDS,
            urgency=settings.URGENCY,
            timeout=settings.TIMEOUT_SECONDS,
        )
    except WebPushError as e:
        logger.error(f"❌ [Dispatch] Invalid VAPID private key - push delivery is disabled: {e}")
        return None
    logger.info(f"✅ [Dispatch] Web Push sender ready | subject={settings.VAPID_SUBJECT}")
    return _sender


def deliver_notification(
    db: Session,
    notification: PendingNotification,
    sender: Optional[WebPushSender] = None,
) -> DeliveryResult:
    """
    Send one notification and record the outcome.

    Successful deliveries are written to notification_log. A 404/410 from the
    push service deletes the subscription and its family. Other failures are
    logged and counted; nothing is retried.
    """
    sender = sender or get_sender()
    if sender is None:
        push_dispatch_failed_total.inc()
        return DeliveryResult(success=False, reason="push delivery not configured")

    result = sender.send(notification, notification.payload(settings.PUBLIC_URL))

    if result.success:
        push_dispatch_success_total.inc()
        log_notification(
            db,
            subscription_id=notification.subscription_id,
            person_name=notification.person_name,
            title=notification.title,
            body=notification.body,
            event_id=notification.event_id,
            lead_minutes=notification.lead_minutes,
        )
        logger.info(
            f"✅ [Dispatch] Sent {notification.event_id} (lead {notification.lead_minutes}m) "
            f"to {notification.subscription_id[:12]}"
        )
        return result

    push_dispatch_failed_total.inc()
    if result.stale:
        if delete_subscription(db, notification.subscription_id):
            stale_subscriptions_purged_total.inc()
        logger.info(
            f"🗑️ [Dispatch] Purged stale subscription {notification.subscription_id[:12]} "
            f"({result.status_code})"
        )
    else:
        logger.error(
            f"❌ [Dispatch] Failed to send {notification.event_id} to "
            f"{notification.subscription_id[:12]}: {result.reason}"
        )
    return result
