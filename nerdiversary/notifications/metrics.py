from prometheus_client import Counter


subscriptions_created_total = Counter(
    "nerdiversary_subscriptions_created_total",
    "Total push subscriptions created or replaced via API",
)

subscriptions_removed_total = Counter(
    "nerdiversary_subscriptions_removed_total",
    "Total push subscriptions removed via API",
)

scheduler_ticks_total = Counter(
    "nerdiversary_scheduler_ticks_total",
    "Total scheduler ticks run",
)

scheduler_ticks_skipped_total = Counter(
    "nerdiversary_scheduler_ticks_skipped_total",
    "Total scheduler ticks skipped (lease held or store unavailable)",
)

notifications_emitted_total = Counter(
    "nerdiversary_notifications_emitted_total",
    "Total notifications emitted by the scheduler",
)

push_dispatch_success_total = Counter(
    "nerdiversary_push_dispatch_success_total",
    "Total successful push deliveries",
)

push_dispatch_failed_total = Counter(
    "nerdiversary_push_dispatch_failed_total",
    "Total failed push deliveries",
)

stale_subscriptions_purged_total = Counter(
    "nerdiversary_stale_subscriptions_purged_total",
    "Total subscriptions deleted after a 404/410 push response",
)
