"""
Milestone generators.

Each generator is a pure function ``(birth, cutoff) -> list[MilestoneEvent]``.
Birth instants are UTC-aware datetimes. Elapsed durations are converted to
whole milliseconds (truncated toward zero) before being added to the birth
instant, so an event's distance from birth does not depend on the birth itself
for anything that is not calendar-based.
"""
from datetime import MAXYEAR, datetime, timedelta
from math import isqrt
from typing import List

from . import constants as c
from .kinds import MilestoneEvent, MilestoneKind, make_event


def after(birth: datetime, elapsed_ms: float) -> datetime:
    return birth + timedelta(milliseconds=int(elapsed_ms))


def calendar_instant(birth: datetime, year: int, month: int, day: int) -> datetime:
    """Same wall-clock minute as ``birth`` on the given date.

    A day past the end of the month (29 February in a common year) rolls over
    into the following month.
    """
    try:
        return birth.replace(year=year, month=month, day=day, second=0, microsecond=0)
    except ValueError:
        first = birth.replace(year=year, month=month, day=1, second=0, microsecond=0)
        return first + timedelta(days=day - 1)


def planetary_years(birth: datetime, cutoff: datetime) -> List[MilestoneEvent]:
    events = []
    for key, planet in c.PLANETS.items():
        period_ms = planet["days"] * c.MS_PER_DAY
        for year in range(1, c.MAX_PLANETARY_ORBITS + 1):
            date = after(birth, year * period_ms)
            if date > cutoff:
                break
            events.append(make_event(
                MilestoneKind.PLANETARY_YEAR, date,
                key=key, name=planet["name"], icon=planet["icon"], year=year,
            ))
    return events


def decimal_counts(birth: datetime, cutoff: datetime) -> List[MilestoneEvent]:
    tables = [
        ("seconds", c.MS_PER_SECOND, c.SECOND_MILESTONES),
        ("minutes", c.MS_PER_MINUTE, c.MINUTE_MILESTONES),
        ("hours", c.MS_PER_HOUR, c.HOUR_MILESTONES),
        ("days", c.MS_PER_DAY, c.DAY_MILESTONES),
        ("weeks", c.MS_PER_WEEK, c.WEEK_MILESTONES),
        ("months", c.MS_PER_MONTH, c.MONTH_MILESTONES),
    ]
    return [
        make_event(
            MilestoneKind.DECIMAL_COUNT, after(birth, count * unit_ms),
            unit=unit, count=count, label=label, short=short,
        )
        for unit, unit_ms, table in tables
        for count, label, short in table
    ]


def binary_milestones(birth: datetime, cutoff: datetime) -> List[MilestoneEvent]:
    events = [
        make_event(MilestoneKind.BINARY_SECONDS, after(birth, 2 ** power * c.MS_PER_SECOND), power=power)
        for power in c.POWERS_OF_2_SECONDS
    ]
    events.extend(
        make_event(MilestoneKind.BINARY_MINUTES, after(birth, 2 ** power * c.MS_PER_MINUTE), power=power)
        for power in c.POWERS_OF_2_MINUTES
    )
    events.extend(
        make_event(MilestoneKind.HEX_SECONDS, after(birth, value * c.MS_PER_SECOND), value=value, hex_label=label)
        for value, label in c.HEX_SECONDS
    )
    return events


def number_bases(birth: datetime, cutoff: datetime) -> List[MilestoneEvent]:
    return [
        make_event(
            MilestoneKind.NUMBER_BASE, after(birth, base ** power * c.UNIT_MS[unit]),
            base=base, name=name, icon=icon, power=power, unit=unit,
        )
        for base, name, icon, units in c.BASE_MILESTONES
        for unit, powers in units.items()
        for power in powers
    ]


def math_constants(birth: datetime, cutoff: datetime) -> List[MilestoneEvent]:
    events = []
    for key, symbol, text, value in c.MATH_CONSTANTS:
        for multiplier, exponent in c.MATH_MULTIPLIERS:
            # τ × 10⁹ seconds is ~199 years out
            if key == "tau" and multiplier == 1_000_000_000:
                continue
            events.append(make_event(
                MilestoneKind.MATH_CONSTANT, after(birth, value * multiplier * c.MS_PER_SECOND),
                key=key, symbol=symbol, text=text, value=value, multiplier=multiplier, exponent=exponent,
            ))
    return events


def _sequence_milestones(birth, kind, sequence, index) -> List[MilestoneEvent]:
    return [
        make_event(kind, after(birth, value * c.UNIT_MS[unit]), value=value, index=index[value], unit=unit)
        for unit, low, high in c.SEQUENCE_UNIT_RANGES
        for value in sequence
        if low <= value <= high
    ]


def fibonacci_numbers(birth: datetime, cutoff: datetime) -> List[MilestoneEvent]:
    return _sequence_milestones(birth, MilestoneKind.FIBONACCI, c.FIBONACCI, c.FIBONACCI_INDEX)


def lucas_numbers(birth: datetime, cutoff: datetime) -> List[MilestoneEvent]:
    return _sequence_milestones(birth, MilestoneKind.LUCAS, c.LUCAS, c.LUCAS_INDEX)


def perfect_numbers(birth: datetime, cutoff: datetime) -> List[MilestoneEvent]:
    events = [
        make_event(MilestoneKind.PERFECT, after(birth, value * c.MS_PER_DAY), value=value, unit="days")
        for value in c.PERFECT_NUMBERS
    ]
    events.extend(
        make_event(MilestoneKind.PERFECT, after(birth, value * c.MS_PER_HOUR), value=value, unit="hours")
        for value in c.PERFECT_HOURS
    )
    return events


def _triangular_root(value: int) -> int:
    return (isqrt(1 + 8 * value) - 1) // 2


def triangular_numbers(birth: datetime, cutoff: datetime) -> List[MilestoneEvent]:
    days = [
        value for i, value in enumerate(c.TRIANGULAR)
        if ((i + 1) % 10 == 0 or value in c.NOTABLE_TRIANGULAR) and 100 <= value <= 15_000
    ]
    hours = [
        value for value in c.TRIANGULAR
        if 10_000 <= value <= 100_000 and c.TRIANGULAR_INDEX[value] % 5 == 0
    ]
    events = [
        make_event(MilestoneKind.TRIANGULAR, after(birth, value * c.MS_PER_DAY),
                   value=value, n=_triangular_root(value), unit="days")
        for value in days
    ]
    events.extend(
        make_event(MilestoneKind.TRIANGULAR, after(birth, value * c.MS_PER_HOUR),
                   value=value, n=_triangular_root(value), unit="hours")
        for value in hours
    )
    return events


def _is_notable_palindrome_day(value: int) -> bool:
    digits = str(value)
    return (
        value % 1111 == 0
        or len(set(digits)) == 1
        or value in c.NOTABLE_PALINDROME_DAYS
    )


def palindromes(birth: datetime, cutoff: datetime) -> List[MilestoneEvent]:
    events = [
        make_event(MilestoneKind.PALINDROME, after(birth, value * c.MS_PER_DAY), value=value, unit="days")
        for value in c.PALINDROMES
        if 1000 <= value <= 15_000 and _is_notable_palindrome_day(value)
    ]
    events.extend(
        make_event(MilestoneKind.PALINDROME, after(birth, value * c.MS_PER_HOUR), value=value, unit="hours")
        for value in c.PALINDROME_HOURS
    )
    return events


def repunits(birth: datetime, cutoff: datetime) -> List[MilestoneEvent]:
    return [
        make_event(MilestoneKind.REPUNIT, after(birth, value * c.UNIT_MS[unit]), value=value, unit=unit)
        for unit, low, high in c.REPUNIT_UNIT_RANGES
        for value in c.REPUNITS
        if low <= value <= high
    ]


def scientific_constants(birth: datetime, cutoff: datetime) -> List[MilestoneEvent]:
    events = [make_event(MilestoneKind.SPEED_OF_LIGHT, after(birth, c.SPEED_OF_LIGHT * c.MS_PER_SECOND))]
    events.extend(
        make_event(MilestoneKind.E_TO_PI, after(birth, c.E_TO_PI * multiplier * c.MS_PER_SECOND),
                   multiplier=multiplier, label=label)
        for multiplier, label in c.E_TO_PI_MULTIPLIERS
    )
    return events


def pop_culture(birth: datetime, cutoff: datetime) -> List[MilestoneEvent]:
    return [
        make_event(MilestoneKind.POP_CULTURE, after(birth, count * unit_ms),
                   label=label, icon=icon, description=description)
        for count, unit_ms, label, icon, description in c.POP_CULTURE_MILESTONES
    ]


def nerdy_holidays(birth: datetime, cutoff: datetime) -> List[MilestoneEvent]:
    events = []
    for month, day, name, icon, description in c.NERDY_HOLIDAYS:
        for offset in range(1, c.CALENDAR_YEARS + 1):
            year = birth.year + offset
            if year > MAXYEAR:
                break
            date = calendar_instant(birth, year, month, day)
            if birth < date <= cutoff:
                events.append(make_event(
                    MilestoneKind.NERDY_HOLIDAY, date,
                    name=name, icon=icon, description=description, year=date.year,
                ))
    return events


def _special_age_labels(age: int) -> tuple:
    labels = []
    if age == 42:
        labels.append("The Answer! 🌌")
    if age in c.PRIME_AGES:
        labels.append("Prime")
    if age in c.SQUARE_AGES:
        labels.append(f"Perfect Square ({c.SQUARE_AGES[age]})")
    if age in c.POWER_OF_2_AGES:
        labels.append(f"Power of 2 ({c.POWER_OF_2_AGES[age]})")
    if age in c.CUBE_AGES:
        labels.append(f"Perfect Cube ({c.CUBE_AGES[age]})")
    if age in c.HEX_ROUND_AGES:
        labels.append(f"Hex Round ({c.HEX_ROUND_AGES[age]})")
    return tuple(labels)


def earth_birthdays(birth: datetime, cutoff: datetime) -> List[MilestoneEvent]:
    events = []
    for age in range(1, c.CALENDAR_YEARS + 1):
        year = birth.year + age
        if year > MAXYEAR:
            break
        date = calendar_instant(birth, year, birth.month, birth.day)
        if birth < date <= cutoff:
            events.append(make_event(
                MilestoneKind.EARTH_BIRTHDAY, date, age=age, labels=_special_age_labels(age),
            ))
    return events


ELAPSED_GENERATORS = (
    planetary_years,
    decimal_counts,
    binary_milestones,
    number_bases,
    math_constants,
    fibonacci_numbers,
    lucas_numbers,
    perfect_numbers,
    triangular_numbers,
    palindromes,
    repunits,
    scientific_constants,
    pop_culture,
)

CALENDAR_GENERATORS = (
    nerdy_holidays,
    earth_birthdays,
)

ALL_GENERATORS = ELAPSED_GENERATORS + CALENDAR_GENERATORS
