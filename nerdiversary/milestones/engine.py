"""
Milestone calculation engine.

``calculate`` folds every generator over one birth instant: the outputs are
concatenated, clipped to ``(birth, cutoff]`` and sorted by
``(date, category, id)``. The horizon uses the average Gregorian year rather
than true calendar years.
"""
import logging
from datetime import datetime, timedelta
from typing import Callable, Iterable, List, Optional

from nerdiversary.utils.timezone import to_utc_aware, utc_now

from .constants import MS_PER_YEAR
from .generators import ALL_GENERATORS
from .kinds import MilestoneEvent

logger = logging.getLogger(__name__)

Generator = Callable[[datetime, datetime], List[MilestoneEvent]]

DEFAULT_HORIZON_YEARS = 100


class InvalidInput(ValueError):
    """Raised when a birth instant is not a usable point in time."""


def sort_key(event: MilestoneEvent):
    return (event.date, event.category.value, event.id)


def normalize_birth(birth) -> datetime:
    if not isinstance(birth, datetime):
        raise InvalidInput(f"Birth instant must be a datetime, got {type(birth).__name__}")
    try:
        return to_utc_aware(birth)
    except (OverflowError, ValueError) as e:
        raise InvalidInput(f"Birth instant {birth!r} cannot be normalised to UTC: {e}") from e


def horizon_cutoff(birth: datetime, horizon_years: float) -> datetime:
    birth = normalize_birth(birth)
    try:
        return birth + timedelta(milliseconds=int(horizon_years * MS_PER_YEAR))
    except OverflowError as e:
        raise InvalidInput(f"Horizon of {horizon_years} years from {birth.isoformat()} is out of range") from e


def calculate(
    birth: datetime,
    horizon_years: float = DEFAULT_HORIZON_YEARS,
    include_past: bool = True,
    now: Optional[datetime] = None,
    generators: Optional[Iterable[Generator]] = None,
) -> List[MilestoneEvent]:
    """
    Compute every milestone for ``birth`` up to ``horizon_years`` after it.

    Args:
        birth: Birth instant. Naive values are taken as UTC.
        horizon_years: Length of the window after birth, in average years.
        include_past: When False, events before ``now`` are dropped.
        now: Reference instant for ``include_past``; defaults to the current time.
        generators: Generator functions to fold; defaults to all of them.

    Returns:
        Events sorted by date, then category, then id.

    Raises:
        InvalidInput: If ``birth`` is not a datetime or the window overflows.
    """
    birth = normalize_birth(birth)
    cutoff = horizon_cutoff(birth, horizon_years)
    threshold = None if include_past else to_utc_aware(now or utc_now())

    events: List[MilestoneEvent] = []
    for generate in generators if generators is not None else ALL_GENERATORS:
        try:
            produced = generate(birth, cutoff)
        except OverflowError as e:
            raise InvalidInput(f"Birth instant {birth.isoformat()} is too close to the end of the calendar") from e
        events.extend(
            event for event in produced
            if birth < event.date <= cutoff and (threshold is None or event.date >= threshold)
        )

    events.sort(key=sort_key)
    return events
