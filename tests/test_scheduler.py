import math
from datetime import datetime, timedelta, timezone

import pytest

from nerdiversary.notifications import repository
from nerdiversary.notifications import scheduler as scheduler_module
from nerdiversary.notifications.scheduler import (
    NotificationScheduler,
    PendingNotification,
    RedisSentLedger,
    build_target_map,
    chunk,
    compute_target,
)
from nerdiversary.utils.timezone import truncate_to_minute

UTC = timezone.utc
LEADS = [1440, 60, 0]


def _subscribe(db, endpoint, members, leads=LEADS):
    return repository.save_subscription(
        db,
        endpoint=endpoint,
        p256dh="BNcRdreALRFXTkOOUHK1EtK2wtaz5Ry4YfYCA_0QTpQtUbVlUls0VJXg7A8u-Ts1XbjhazAkj7I99e8QcYP7DkM",
        auth="tBHItJI5svbpez7KI4CCXg",
        lead_minutes=leads,
        members=members,
    )


def test_target_for_one_billion_seconds(offset_table):
    now = datetime(2030, 1, 1, tzinfo=UTC)
    offset = offset_table.get("seconds-1000000000")

    target = compute_target(now, offset, 0)

    assert target == now - timedelta(seconds=1_000_000_000)
    assert target == now - timedelta(milliseconds=1_000_000_000_000)


def test_target_round_trip_lands_in_the_same_minute(offset_table):
    now = datetime(2031, 6, 17, 13, 42, 27, 500000, tzinfo=UTC)
    for offset in offset_table:
        for lead in LEADS:
            target = compute_target(now, offset, lead)
            recomputed = target + timedelta(milliseconds=offset.elapsed_ms) - timedelta(minutes=lead)
            assert truncate_to_minute(recomputed) == truncate_to_minute(now)


def test_target_map_keys_are_minute_strings(offset_table):
    now = datetime(2031, 6, 17, 13, 42, tzinfo=UTC)
    targets = build_target_map(offset_table, LEADS, now)

    assert all(len(key) == 16 and key[10] == "T" for key in targets)
    assert sum(len(pairs) for pairs in targets.values()) == len(offset_table) * len(LEADS)


def test_chunk_sizes():
    assert [list(c) for c in chunk([1, 2, 3, 4, 5], 2)] == [[1, 2], [3, 4], [5]]
    assert list(chunk([], 3)) == []
    with pytest.raises(ValueError):
        list(chunk([1], 0))


@pytest.mark.parametrize("batch_size", [1, 7, 90, 10_000])
def test_store_round_trips_are_ceil_n_over_k(db_session, offset_table, monkeypatch, batch_size):
    now = datetime(2031, 6, 17, 13, 42, tzinfo=UTC)
    calls = []
    real = repository.find_members_by_birth_datetimes

    def counting(db, keys):
        calls.append(len(keys))
        assert len(keys) <= batch_size
        return real(db, keys)

    monkeypatch.setattr(repository, "find_members_by_birth_datetimes", counting)
    scheduler = NotificationScheduler(offset_table, LEADS, batch_size=batch_size)

    scheduler.run_tick(db_session, now)

    n = len(build_target_map(offset_table, LEADS, now))
    assert len(calls) == math.ceil(n / batch_size)
    assert sum(calls) == n


def test_query_count_does_not_depend_on_subscribers(db_session, offset_table, monkeypatch):
    now = datetime(2031, 9, 9, 0, 46, tzinfo=UTC)
    calls = []
    real = repository.find_members_by_birth_datetimes

    def counting(db, keys):
        calls.append(keys)
        return real(db, keys)

    monkeypatch.setattr(repository, "find_members_by_birth_datetimes", counting)
    scheduler = NotificationScheduler(offset_table, LEADS, batch_size=90)

    scheduler.run_tick(db_session, now)
    empty_store_calls = len(calls)

    for i in range(50):
        _subscribe(db_session, f"https://push.example.com/sub/{i}", [(f"P{i}", f"19{50 + i % 40}-01-01T00:00")])
    calls.clear()
    scheduler.run_tick(db_session, now)

    assert len(calls) == empty_store_calls


def test_due_milestone_is_emitted(db_session, offset_table):
    subscription = _subscribe(db_session, "https://fcm.googleapis.com/fcm/send/abc", [("Ada", "2000-01-01T00:00")])
    event_at = datetime(2000, 1, 1, tzinfo=UTC) + timedelta(seconds=1_000_000_000)
    now = event_at - timedelta(minutes=60)

    scheduler = NotificationScheduler(offset_table, LEADS, batch_size=90)
    notifications = [n for n in scheduler.run_tick(db_session, now) if n.event_id == "seconds-1000000000"]

    assert len(notifications) == 1
    notification = notifications[0]
    assert notification.subscription_id == subscription.id
    assert notification.lead_minutes == 60
    assert notification.title == "🔢 1 hour away!"
    assert notification.body == "Ada: 1 Billion Seconds"
    assert notification.event_at == event_at
    assert notification.endpoint == "https://fcm.googleapis.com/fcm/send/abc"


def test_disabled_lead_is_not_emitted(db_session, offset_table):
    _subscribe(db_session, "https://fcm.googleapis.com/fcm/send/abc", [("Ada", "2000-01-01T00:00")], leads=[0])
    now = datetime(2000, 1, 1, tzinfo=UTC) + timedelta(seconds=1_000_000_000) - timedelta(minutes=60)

    scheduler = NotificationScheduler(offset_table, LEADS, batch_size=90)
    notifications = scheduler.run_tick(db_session, now)

    assert not [n for n in notifications if n.event_id == "seconds-1000000000"]


def test_running_a_tick_twice_duplicates_without_a_ledger(db_session, offset_table):
    _subscribe(db_session, "https://fcm.googleapis.com/fcm/send/abc", [("Ada", "2000-01-01T00:00")])
    now = datetime(2000, 1, 1, tzinfo=UTC) + timedelta(seconds=1_000_000_000)

    scheduler = NotificationScheduler(offset_table, LEADS, batch_size=90)
    first = scheduler.run_tick(db_session, now)
    second = scheduler.run_tick(db_session, now)

    assert first
    assert [(n.subscription_id, n.event_id, n.lead_minutes) for n in first] == \
        [(n.subscription_id, n.event_id, n.lead_minutes) for n in second]


def test_ledger_suppresses_repeat_notifications(db_session, offset_table, fake_ledger):
    _subscribe(db_session, "https://fcm.googleapis.com/fcm/send/abc", [("Ada", "2000-01-01T00:00")])
    now = datetime(2000, 1, 1, tzinfo=UTC) + timedelta(seconds=1_000_000_000)

    scheduler = NotificationScheduler(offset_table, LEADS, batch_size=90, ledger=fake_ledger)
    first = scheduler.run_tick(db_session, now)
    second = scheduler.run_tick(db_session, now)

    assert first
    assert second == []


def test_calendar_milestone_is_emitted_by_time_of_day(db_session, offset_table):
    _subscribe(db_session, "https://updates.push.services.mozilla.com/wpush/v2/x", [("Grace", "1990-07-01T09:30")])
    now = datetime(2025, 3, 13, 9, 30, 12, tzinfo=UTC)

    scheduler = NotificationScheduler(offset_table, LEADS, batch_size=90)
    notifications = [n for n in scheduler.run_tick(db_session, now) if n.event_id == "pi-day-2025"]

    assert len(notifications) == 1
    assert notifications[0].lead_minutes == 1440
    assert notifications[0].title == "🥧 1 day away!"
    assert notifications[0].body == "Grace: Pi Day 2025"
    assert notifications[0].event_at == datetime(2025, 3, 14, 9, 30, tzinfo=UTC)


def test_calendar_pass_respects_enabled_leads(db_session, offset_table):
    _subscribe(db_session, "https://updates.push.services.mozilla.com/wpush/v2/x", [("Grace", "1990-07-01T09:30")], leads=[0])
    now = datetime(2025, 3, 13, 9, 30, tzinfo=UTC)

    scheduler = NotificationScheduler(offset_table, LEADS, batch_size=90)

    assert not [n for n in scheduler.run_tick(db_session, now) if n.event_id == "pi-day-2025"]


def test_unsupported_stored_birth_does_not_break_the_tick(db_session, offset_table):
    _subscribe(db_session, "https://push.example.com/far-future", [("Zed", "9990-06-01T09:30")])
    _subscribe(db_session, "https://updates.push.services.mozilla.com/wpush/v2/x", [("Grace", "1990-07-01T09:30")])
    now = datetime(2025, 3, 13, 9, 30, tzinfo=UTC)

    scheduler = NotificationScheduler(offset_table, LEADS, batch_size=90)
    notifications = scheduler.run_tick(db_session, now)

    assert [n.body for n in notifications if n.event_id == "pi-day-2025"] == ["Grace: Pi Day 2025"]
    assert not [n for n in notifications if n.person_name == "Zed"]


def test_leap_day_birthday_fires_on_first_of_march(db_session, offset_table):
    _subscribe(db_session, "https://push.example.com/leap", [("Leap", "2000-02-29T10:30")])
    now = datetime(2001, 3, 1, 10, 30, tzinfo=UTC)

    scheduler = NotificationScheduler(offset_table, LEADS, batch_size=90)
    birthdays = [n for n in scheduler.run_tick(db_session, now) if n.event_id == "earth-birthday-1"]

    assert len(birthdays) == 1
    assert birthdays[0].lead_minutes == 0
    assert birthdays[0].event_at == datetime(2001, 3, 1, 10, 30, tzinfo=UTC)
    assert birthdays[0].body == "Leap: 1st Birthday"


def test_calendar_pass_ignores_other_times_of_day(db_session, offset_table, monkeypatch):
    _subscribe(db_session, "https://updates.push.services.mozilla.com/wpush/v2/x", [("Grace", "1990-07-01T09:31")])
    now = datetime(2025, 3, 13, 9, 30, tzinfo=UTC)
    computed = []
    real = scheduler_module.calculate

    def tracking(*args, **kwargs):
        computed.append(args)
        return real(*args, **kwargs)

    monkeypatch.setattr(scheduler_module, "calculate", tracking)
    scheduler = NotificationScheduler(offset_table, LEADS, batch_size=90)

    assert not [n for n in scheduler.run_tick(db_session, now) if n.event_id == "pi-day-2025"]
    assert computed == []


def test_birthday_fires_now(db_session, offset_table):
    _subscribe(db_session, "https://push.example.com/a", [("Linus", "1969-12-28T06:00")])
    now = datetime(2011, 12, 28, 6, 0, tzinfo=UTC)

    scheduler = NotificationScheduler(offset_table, LEADS, batch_size=90)
    birthdays = [n for n in scheduler.run_tick(db_session, now) if n.event_id == "earth-birthday-42"]

    assert len(birthdays) == 1
    assert birthdays[0].title == "🎂 It's happening NOW!"
    assert birthdays[0].body == "Linus: 42nd Birthday"


def test_pending_notification_round_trips_through_json_dict():
    pending = PendingNotification(
        subscription_id="s", endpoint="https://e", p256dh="k", auth="a", person_name="Ada",
        event_id="seconds-1000000000", title="t", body="b", icon="🔢", lead_minutes=0,
        event_at=datetime(2031, 9, 9, 1, 46, 40, tzinfo=UTC),
    )

    assert PendingNotification.from_dict(pending.to_dict()) == pending
    assert pending.payload("https://nerdiversary.app/")["url"] == "https://nerdiversary.app/"


def test_redis_ledger_uses_set_nx_with_ttl():
    class StubRedis:
        def __init__(self):
            self.calls = []
            self.keys = set()

        def set(self, key, value, nx=False, ex=None):
            self.calls.append((key, nx, ex))
            if nx and key in self.keys:
                return None
            self.keys.add(key)
            return True

    client = StubRedis()
    ledger = RedisSentLedger(client, ttl_seconds=120)

    assert ledger.claim("sub", "pi-day-2025", 60) is True
    assert ledger.claim("sub", "pi-day-2025", 60) is False
    assert ledger.claim("sub", "pi-day-2025", 0) is True
    assert client.calls[0] == ("nerdiversary:sent:sub:pi-day-2025:60", True, 120)
