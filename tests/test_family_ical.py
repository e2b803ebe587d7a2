from datetime import datetime, timezone

import pytest

from nerdiversary.milestones.engine import calculate
from nerdiversary.milestones.family import parse_family_param
from nerdiversary.milestones.ical import escape_ical_text, format_ical_date, generate_ical
from nerdiversary.milestones.kinds import MilestoneKind, make_event
from nerdiversary.notifications.formatting import format_notification_body, format_notification_title

UTC = timezone.utc


def test_parse_single_member():
    members = parse_family_param("Alice|1990-05-15|14:30")

    assert len(members) == 1
    assert members[0].name == "Alice"
    assert members[0].birth == datetime(1990, 5, 15, 14, 30, tzinfo=UTC)


def test_parse_multiple_members_with_default_time_and_url_encoding():
    members = parse_family_param("Alice|1990-05-15|14:30,Bob%20Smith|1985-12-25")

    assert [m.name for m in members] == ["Alice", "Bob Smith"]
    assert members[1].birth == datetime(1985, 12, 25, tzinfo=UTC)


@pytest.mark.parametrize("value", ["", "Alice", "|1990-01-01", "Bob|1990-02-30", "Cy|1990-01-01|99:99"])
def test_parse_drops_invalid_entries(value):
    assert parse_family_param(value) == []


def test_ical_document_structure():
    event = make_event(MilestoneKind.SPEED_OF_LIGHT, datetime(2009, 7, 2, 20, 47, 38, tzinfo=UTC))
    stamp = datetime(2024, 1, 1, tzinfo=UTC)

    text = generate_ical([(None, event)], stamp=stamp)
    lines = text.split("\r\n")

    assert lines[0] == "BEGIN:VCALENDAR"
    assert lines[-2] == "END:VCALENDAR"
    assert "UID:speed-of-light-seconds@nerdiversary" in lines
    assert "DTSTAMP:20240101T000000Z" in lines
    assert "DTSTART:20090702T204738Z" in lines
    assert "DTEND:20090702T214738Z" in lines
    assert "CATEGORIES:Scientific" in lines
    assert "SUMMARY:💡 Speed of Light Seconds" in lines
    assert lines.count("BEGIN:VALARM") == 2
    assert "TRIGGER:-P1D" in lines and "TRIGGER:-PT1H" in lines


def test_ical_family_prefixes_person():
    event = calculate(datetime(2000, 1, 1, tzinfo=UTC), horizon_years=2)[0]

    text = generate_ical([("Ada Lovelace", event)], is_family=True)

    assert f"UID:ada-lovelace-{event.id}@nerdiversary" in text
    assert f"SUMMARY:{escape_ical_text(f'{event.icon} Ada Lovelace: {event.title}')}" in text


def test_escape_ical_text():
    assert escape_ical_text("a, b; c\\d\n<b>e</b>") == "a\\, b\\; c\\\\d\\ne"


def test_format_ical_date_from_naive():
    assert format_ical_date(datetime(2030, 1, 2, 3, 4, 5)) == "20300102T030405Z"


@pytest.mark.parametrize("lead, expected", [
    (0, "🎂 It's happening NOW!"),
    (15, "🎂 15 minutes away!"),
    (60, "🎂 1 hour away!"),
    (90, "🎂 2 hours away!"),
    (1440, "🎂 1 day away!"),
    (2880, "🎂 2 days away!"),
])
def test_notification_titles(lead, expected):
    assert format_notification_title("🎂", lead) == expected


def test_notification_body():
    assert format_notification_body("Ada", "1 Billion Seconds") == "Ada: 1 Billion Seconds"
