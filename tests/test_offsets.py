from datetime import datetime, timezone

import pytest

from nerdiversary.milestones import offsets as offsets_module
from nerdiversary.milestones.offsets import (
    REFERENCE_BIRTH,
    OffsetTableError,
    build_offset_table,
    get_offset_table,
)


def test_reference_birth_is_millennium_midnight():
    assert REFERENCE_BIRTH == datetime(2000, 1, 1, tzinfo=timezone.utc)


def test_one_billion_seconds_offset(offset_table):
    offset = offset_table.get("seconds-1000000000")

    assert offset.elapsed_ms == 1_000_000_000_000
    assert offset.label == "1 Billion Seconds"
    assert offset.icon == "🔢"


def test_offsets_are_positive_and_exclude_calendar_events(offset_table):
    assert len(offset_table) > 0
    assert all(o.elapsed_ms > 0 for o in offset_table)
    ids = {o.event_id for o in offset_table}
    assert not any(i.startswith("earth-birthday-") for i in ids)
    assert not any(i.startswith("pi-day-") for i in ids)


def test_offset_table_is_deterministic(offset_table):
    assert build_offset_table() == offset_table


def test_offsets_are_ordered_by_elapsed_time(offset_table):
    elapsed = [o.elapsed_ms for o in offset_table]

    assert elapsed == sorted(elapsed)


def test_missing_event_raises_key_error(offset_table):
    with pytest.raises(KeyError):
        offset_table.get("earth-birthday-1")


def test_get_offset_table_is_memoised():
    get_offset_table.cache_clear()

    assert get_offset_table() is get_offset_table()


def test_engine_failure_becomes_offset_table_error():
    with pytest.raises(OffsetTableError):
        build_offset_table(reference_birth=datetime(9990, 1, 1, tzinfo=timezone.utc))


def test_non_positive_offset_is_rejected(monkeypatch):
    from nerdiversary.milestones.kinds import MilestoneKind, make_event

    def broken_generator(birth, cutoff):
        return [make_event(MilestoneKind.SPEED_OF_LIGHT, birth)]

    monkeypatch.setattr(offsets_module, "ELAPSED_GENERATORS", (broken_generator,))
    monkeypatch.setattr(offsets_module, "calculate", lambda birth, horizon_years, generators: [
        event for g in generators for event in g(birth, birth)
    ])

    with pytest.raises(OffsetTableError):
        build_offset_table()
