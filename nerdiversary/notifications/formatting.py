def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def format_notification_title(icon: str, lead_minutes: int) -> str:
    """Title wording by distance to the event: now, minutes, hours or days."""
    if lead_minutes == 0:
        return f"{icon} It's happening NOW!"
    if lead_minutes < 60:
        return f"{icon} {lead_minutes} minutes away!"
    if lead_minutes < 1440:
        hours = _round_half_up(lead_minutes / 60)
        return f"{icon} {hours} hour{'s' if hours > 1 else ''} away!"
    days = _round_half_up(lead_minutes / 1440)
    return f"{icon} {days} day{'s' if days > 1 else ''} away!"


def format_notification_body(person_name: str, milestone_title: str) -> str:
    return f"{person_name}: {milestone_title}"
