"""
Offset table.

The engine is run once against a fixed reference birth. Every elapsed-duration
milestone then becomes a plain millisecond offset that can be subtracted from
"now" to find which birth instants have a milestone due, without touching any
individual subscriber. Calendar-recurring events are left out; they land on
dates, not on fixed durations.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from typing import Iterator, Tuple

from .engine import calculate, normalize_birth
from .generators import ELAPSED_GENERATORS

logger = logging.getLogger(__name__)

REFERENCE_BIRTH = datetime(2000, 1, 1, tzinfo=timezone.utc)
OFFSET_HORIZON_YEARS = 120


class OffsetTableError(RuntimeError):
    """Raised when the offset table cannot be built."""


@dataclass(frozen=True)
class Offset:
    elapsed_ms: int
    label: str
    icon: str
    event_id: str


@dataclass(frozen=True)
class OffsetTable:
    reference_birth: datetime
    offsets: Tuple[Offset, ...]

    def __len__(self) -> int:
        return len(self.offsets)

    def __iter__(self) -> Iterator[Offset]:
        return iter(self.offsets)

    def get(self, event_id: str) -> Offset:
        for offset in self.offsets:
            if offset.event_id == event_id:
                return offset
        raise KeyError(event_id)


def _elapsed_ms(later: datetime, earlier: datetime) -> int:
    delta = later - earlier
    return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000


def build_offset_table(
    reference_birth: datetime = REFERENCE_BIRTH,
    horizon_years: int = OFFSET_HORIZON_YEARS,
) -> OffsetTable:
    reference_birth = normalize_birth(reference_birth)
    try:
        events = calculate(reference_birth, horizon_years=horizon_years, generators=ELAPSED_GENERATORS)
    except ValueError as e:
        raise OffsetTableError(f"Engine failed for reference birth {reference_birth!r}: {e}") from e

    offsets = []
    for event in events:
        if event.is_calendar_based:
            continue
        elapsed = _elapsed_ms(event.date, reference_birth)
        if elapsed <= 0:
            raise OffsetTableError(f"Non-positive offset {elapsed} ms for milestone {event.id}")
        offsets.append(Offset(elapsed_ms=elapsed, label=event.title, icon=event.icon, event_id=event.id))

    logger.info(f"📐 [Offsets] Built offset table with {len(offsets)} offsets from {reference_birth.isoformat()}")
    return OffsetTable(reference_birth=reference_birth, offsets=tuple(offsets))


@lru_cache(maxsize=1)
def get_offset_table() -> OffsetTable:
    """Process-wide offset table for task entry points."""
    return build_offset_table()
