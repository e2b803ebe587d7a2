"""iCalendar rendering for milestone feeds."""
import re
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from nerdiversary.utils.timezone import to_utc_aware, utc_now

from .kinds import MilestoneEvent

PRODID = "-//Nerdiversary//Nerdy Anniversary Calculator//EN"
EVENT_DURATION = timedelta(hours=1)

_TAG_RE = re.compile(r"<[^>]*>")


def format_ical_date(dt: datetime) -> str:
    return to_utc_aware(dt).strftime("%Y%m%dT%H%M%SZ")


def escape_ical_text(text: str) -> str:
    text = _TAG_RE.sub("", text)
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\n", "\\n")
    )


def generate_ical(
    events: Iterable[Tuple[Optional[str], MilestoneEvent]],
    is_family: bool = False,
    stamp: Optional[datetime] = None,
) -> str:
    """
    Render ``(person_name, event)`` pairs as a VCALENDAR document.

    Family feeds prefix each summary with the person's name and namespace the
    UID by person so the same milestone for two people stays distinct.
    """
    calendar_name = "Family Nerdiversaries" if is_family else "My Nerdiversaries"
    dtstamp = format_ical_date(stamp or utc_now())
    lines: List[str] = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        f"X-WR-CALNAME:{calendar_name}",
        "X-WR-CALDESC:Nerdy anniversary milestones",
    ]

    for person_name, event in events:
        if is_family and person_name:
            summary = f"{event.icon} {person_name}: {event.title}"
            slug = re.sub(r"[^a-z0-9]+", "-", person_name.lower()).strip("-")
            uid = f"{slug}-{event.id}@nerdiversary"
        else:
            summary = f"{event.icon} {event.title}"
            uid = f"{event.id}@nerdiversary"

        lines.extend([
            "BEGIN:VEVENT",
            f"UID:{uid}",
            f"DTSTAMP:{dtstamp}",
            f"DTSTART:{format_ical_date(event.date)}",
            f"DTEND:{format_ical_date(event.date + EVENT_DURATION)}",
            f"SUMMARY:{escape_ical_text(summary)}",
            f"DESCRIPTION:{escape_ical_text(event.description)}",
            f"CATEGORIES:{event.category.display_name}",
            "STATUS:CONFIRMED",
            "TRANSP:TRANSPARENT",
            "BEGIN:VALARM",
            "TRIGGER:-P1D",
            "ACTION:DISPLAY",
            f"DESCRIPTION:{escape_ical_text(f'Tomorrow: {event.title}')}",
            "END:VALARM",
            "BEGIN:VALARM",
            "TRIGGER:-PT1H",
            "ACTION:DISPLAY",
            f"DESCRIPTION:{escape_ical_text(f'In 1 hour: {event.title}')}",
            "END:VALARM",
            "END:VEVENT",
        ])

    lines.append("END:VCALENDAR")
    return "\r\n".join(lines) + "\r\n"
