"""
Milestone kinds and their formatters.

Every milestone the engine can produce belongs to exactly one MilestoneKind.
Each kind is registered with a single formatter that renders the event id,
title, description, icon and short label from the kind's parameters, plus the
category and whether the milestone recurs by calendar date. The registry is
checked at import time, so adding a kind without a formatter fails loudly
instead of falling back to a generic rendering.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from math import floor
from typing import Any, Callable, Dict

from .constants import E_TO_PI, SPEED_OF_LIGHT, get_ordinal, to_superscript


class Category(str, Enum):
    PLANETARY = "planetary"
    DECIMAL = "decimal"
    BINARY = "binary"
    MATHEMATICAL = "mathematical"
    FIBONACCI = "fibonacci"
    SCIENTIFIC = "scientific"
    POP_CULTURE = "pop-culture"

    @property
    def display_name(self) -> str:
        return _CATEGORY_DISPLAY[self][0]

    @property
    def icon(self) -> str:
        return _CATEGORY_DISPLAY[self][1]


_CATEGORY_DISPLAY = {
    Category.PLANETARY: ("Planetary", "🪐"),
    Category.DECIMAL: ("Decimal", "🔢"),
    Category.BINARY: ("Number Bases", "💻"),
    Category.MATHEMATICAL: ("Mathematical", "π"),
    Category.FIBONACCI: ("Fibonacci", "🌀"),
    Category.SCIENTIFIC: ("Scientific", "🔬"),
    Category.POP_CULTURE: ("Pop Culture", "🎬"),
}


class MilestoneKind(str, Enum):
    PLANETARY_YEAR = "planetary-year"
    DECIMAL_COUNT = "decimal-count"
    BINARY_SECONDS = "binary-seconds"
    BINARY_MINUTES = "binary-minutes"
    HEX_SECONDS = "hex-seconds"
    NUMBER_BASE = "number-base"
    MATH_CONSTANT = "math-constant"
    FIBONACCI = "fibonacci"
    LUCAS = "lucas"
    PERFECT = "perfect"
    TRIANGULAR = "triangular"
    PALINDROME = "palindrome"
    REPUNIT = "repunit"
    SPEED_OF_LIGHT = "speed-of-light"
    E_TO_PI = "e-to-pi"
    POP_CULTURE = "pop-culture"
    NERDY_HOLIDAY = "nerdy-holiday"
    EARTH_BIRTHDAY = "earth-birthday"


@dataclass(frozen=True)
class MilestoneEvent:
    id: str
    kind: MilestoneKind
    title: str
    description: str
    date: datetime
    category: Category
    icon: str
    milestone: str
    is_calendar_based: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "title": self.title,
            "description": self.description,
            "date": self.date.isoformat(),
            "category": self.category.value,
            "icon": self.icon,
            "milestone": self.milestone,
            "isCalendarBased": self.is_calendar_based,
        }


@dataclass(frozen=True)
class _KindSpec:
    category: Category
    calendar_based: bool
    render: Callable[..., Dict[str, str]] = field(repr=False)


_FORMATTERS: Dict[MilestoneKind, _KindSpec] = {}


def _formatter(kind: MilestoneKind, category: Category, calendar_based: bool = False):
    def register(func):
        if kind in _FORMATTERS:
            raise RuntimeError(f"Duplicate formatter for milestone kind {kind.value}")
        _FORMATTERS[kind] = _KindSpec(category=category, calendar_based=calendar_based, render=func)
        return func
    return register


def _singular(unit: str) -> str:
    return unit[:-1].capitalize()


def make_event(kind: MilestoneKind, date: datetime, **params: Any) -> MilestoneEvent:
    spec = _FORMATTERS[kind]
    text = spec.render(**params)
    return MilestoneEvent(
        id=text["id"],
        kind=kind,
        title=text["title"],
        description=text["description"],
        date=date,
        category=spec.category,
        icon=text["icon"],
        milestone=text["milestone"],
        is_calendar_based=spec.calendar_based,
    )


# ============================================================================
# FORMATTERS
# ============================================================================

@_formatter(MilestoneKind.PLANETARY_YEAR, Category.PLANETARY)
def _planetary_year(key: str, name: str, icon: str, year: int) -> Dict[str, str]:
    plural = "s" if year > 1 else ""
    return {
        "id": f"{key}-{year}",
        "title": f"{name} Year {year}",
        "description": f"You've completed {year} orbit{plural} around the Sun as measured from {name}!",
        "icon": icon,
        "milestone": f"{year} {name} year{plural}",
    }


_DECIMAL_UNITS = {
    # unit: (icon, description template)
    "seconds": ("🔢", "You've been alive for exactly {short}!"),
    "minutes": ("⏱️", "You've experienced exactly {short}!"),
    "hours": ("⏰", "You've lived for exactly {short}!"),
    "days": ("📆", "You've experienced {short} on Earth!"),
    "weeks": ("📅", "You've lived for {short}!"),
    "months": ("🗓️", "You've experienced {short} of life!"),
}


@_formatter(MilestoneKind.DECIMAL_COUNT, Category.DECIMAL)
def _decimal_count(unit: str, count: int, label: str, short: str) -> Dict[str, str]:
    icon, template = _DECIMAL_UNITS[unit]
    description = template.format(short=short)
    if unit == "hours" and count == 10_000:
        description += " You've mastered life according to the 10,000-hour rule!"
    return {
        "id": f"{unit}-{count}",
        "title": label,
        "description": description,
        "icon": icon,
        "milestone": short,
    }


@_formatter(MilestoneKind.BINARY_SECONDS, Category.BINARY)
def _binary_seconds(power: int) -> Dict[str, str]:
    return {
        "id": f"binary-seconds-{power}",
        "title": f"2^{power} Seconds",
        "description": f"You've lived for exactly 2{to_superscript(power)} = {2 ** power:,} seconds!",
        "icon": "💻",
        "milestone": f"2^{power} seconds",
    }


@_formatter(MilestoneKind.BINARY_MINUTES, Category.BINARY)
def _binary_minutes(power: int) -> Dict[str, str]:
    return {
        "id": f"binary-minutes-{power}",
        "title": f"2^{power} Minutes",
        "description": f"You've lived for exactly 2{to_superscript(power)} = {2 ** power:,} minutes!",
        "icon": "🔟",
        "milestone": f"2^{power} minutes",
    }


@_formatter(MilestoneKind.HEX_SECONDS, Category.BINARY)
def _hex_seconds(value: int, hex_label: str) -> Dict[str, str]:
    return {
        "id": f"hex-{hex_label}",
        "title": f"{hex_label} Seconds",
        "description": f"You've lived for {hex_label} ({value:,}) seconds!",
        "icon": "🔢",
        "milestone": f"{hex_label} seconds",
    }


@_formatter(MilestoneKind.NUMBER_BASE, Category.BINARY)
def _number_base(base: int, name: str, icon: str, power: int, unit: str) -> Dict[str, str]:
    return {
        "id": f"base{base}-{power}-{unit}",
        "title": f"{base}^{power} {unit.capitalize()}",
        "description": f"You've lived for {base}{to_superscript(power)} = {base ** power:,} {unit} ({name})!",
        "icon": icon,
        "milestone": f"{base}^{power} {unit}",
    }


@_formatter(MilestoneKind.MATH_CONSTANT, Category.MATHEMATICAL)
def _math_constant(key: str, symbol: str, text: str, value: float, multiplier: int, exponent: str) -> Dict[str, str]:
    label = f"{symbol} × 10{exponent} Seconds"
    return {
        "id": f"{key}-{multiplier}",
        "title": label,
        "description": f"You've lived for {text} × {multiplier:.0e} ≈ {floor(value * multiplier):,} seconds!",
        "icon": symbol,
        "milestone": label,
    }


@_formatter(MilestoneKind.FIBONACCI, Category.FIBONACCI)
def _fibonacci(value: int, index: int, unit: str) -> Dict[str, str]:
    return {
        "id": f"fib-{unit}-{value}",
        "title": f"Fibonacci {_singular(unit)} {value:,}",
        "description": f"{_singular(unit)} {value:,} is a Fibonacci number!",
        "icon": "🌀",
        "milestone": f"F({index}) = {value:,} {unit}",
    }


@_formatter(MilestoneKind.LUCAS, Category.FIBONACCI)
def _lucas(value: int, index: int, unit: str) -> Dict[str, str]:
    return {
        "id": f"lucas-{unit}-{value}",
        "title": f"Lucas {_singular(unit)} {value:,}",
        "description": f"{_singular(unit)} {value:,} is a Lucas number!",
        "icon": "🔷",
        "milestone": f"L({index}) = {value:,} {unit}",
    }


@_formatter(MilestoneKind.PERFECT, Category.MATHEMATICAL)
def _perfect(value: int, unit: str) -> Dict[str, str]:
    description = f"{_singular(unit)} {value:,} is a perfect number!"
    if unit == "days":
        description += f" ({value} = sum of its divisors)"
    return {
        "id": f"perfect-{unit}-{value}",
        "title": f"Perfect {_singular(unit)} {value:,}",
        "description": description,
        "icon": "💎",
        "milestone": f"{value:,} {unit} (perfect number)",
    }


@_formatter(MilestoneKind.TRIANGULAR, Category.MATHEMATICAL)
def _triangular(value: int, n: int, unit: str) -> Dict[str, str]:
    return {
        "id": f"triangular-{unit}-{value}",
        "title": f"Triangular {_singular(unit)} {value:,}",
        "description": f"{_singular(unit)} {value:,} is triangular! (1+2+...+{n} = {value})",
        "icon": "🔺",
        "milestone": f"T({n}) = {value:,} {unit}",
    }


@_formatter(MilestoneKind.PALINDROME, Category.MATHEMATICAL)
def _palindrome(value: int, unit: str) -> Dict[str, str]:
    return {
        "id": f"palindrome-{unit}-{value}",
        "title": f"Palindrome {_singular(unit)} {value:,}",
        "description": f"{_singular(unit)} {value} is a palindrome - reads the same forwards and backwards!",
        "icon": "🪞",
        "milestone": f"{value:,} {unit} (palindrome)",
    }


@_formatter(MilestoneKind.REPUNIT, Category.BINARY)
def _repunit(value: int, unit: str) -> Dict[str, str]:
    return {
        "id": f"repunit-{unit}-{value}",
        "title": f"Repunit {_singular(unit)} {value:,}",
        "description": f"{_singular(unit)} {value:,} is a repunit (all 1s)!",
        "icon": "1️⃣",
        "milestone": f"{value:,} {unit} (repunit)",
    }


@_formatter(MilestoneKind.SPEED_OF_LIGHT, Category.SCIENTIFIC)
def _speed_of_light() -> Dict[str, str]:
    return {
        "id": "speed-of-light-seconds",
        "title": "Speed of Light Seconds",
        "description": f"You've lived for {SPEED_OF_LIGHT:,} seconds - the speed of light in m/s!",
        "icon": "💡",
        "milestone": f"c = {SPEED_OF_LIGHT:,} seconds",
    }


@_formatter(MilestoneKind.E_TO_PI, Category.SCIENTIFIC)
def _e_to_pi(multiplier: int, label: str) -> Dict[str, str]:
    return {
        "id": f"e-pi-{multiplier}",
        "title": f"e^π × {label} Seconds",
        "description": f"You've lived for e^π × {multiplier:,} ≈ {floor(E_TO_PI * multiplier):,} seconds!",
        "icon": "🧮",
        "milestone": f"e^π × {multiplier:,} seconds",
    }


@_formatter(MilestoneKind.POP_CULTURE, Category.POP_CULTURE)
def _pop_culture(label: str, icon: str, description: str) -> Dict[str, str]:
    return {
        "id": "pop-" + label.replace(" ", "-").replace(",", "-"),
        "title": label,
        "description": description,
        "icon": icon,
        "milestone": label,
    }


@_formatter(MilestoneKind.NERDY_HOLIDAY, Category.POP_CULTURE, calendar_based=True)
def _nerdy_holiday(name: str, icon: str, description: str, year: int) -> Dict[str, str]:
    return {
        "id": f"{name.lower().replace(' ', '-')}-{year}",
        "title": f"{name} {year}",
        "description": f"{name}! ({description})",
        "icon": icon,
        "milestone": name,
    }


@_formatter(MilestoneKind.EARTH_BIRTHDAY, Category.PLANETARY, calendar_based=True)
def _earth_birthday(age: int, labels: tuple) -> Dict[str, str]:
    ordinal = get_ordinal(age)
    special = f" — {', '.join(labels)}" if labels else ""
    return {
        "id": f"earth-birthday-{age}",
        "title": f"{ordinal} Birthday",
        "description": f"Happy {ordinal} birthday on Earth!{special}",
        "icon": "🎂",
        "milestone": f"{age} Earth years",
    }


_missing = set(MilestoneKind) - set(_FORMATTERS)
if _missing:
    raise RuntimeError(f"Milestone kinds without a formatter: {sorted(k.value for k in _missing)}")
