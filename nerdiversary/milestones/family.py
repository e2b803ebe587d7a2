from dataclasses import dataclass
from datetime import datetime
from typing import List
from urllib.parse import unquote

from nerdiversary.utils.timezone import combine_birth_date_time


@dataclass(frozen=True)
class FamilyEntry:
    name: str
    birth: datetime


def parse_family_param(family_param: str) -> List[FamilyEntry]:
    """
    Parse a ``"Name|YYYY-MM-DD|HH:MM,..."`` family string.

    Names are URL-decoded and the time defaults to midnight UTC. Entries
    without a name or with an unparseable date are dropped.
    """
    members = []
    for raw in (family_param or "").split(","):
        parts = raw.split("|")
        name = unquote(parts[0]).strip()
        date_str = parts[1].strip() if len(parts) > 1 else ""
        time_str = parts[2].strip() if len(parts) > 2 and parts[2].strip() else None
        if not name or not date_str:
            continue
        try:
            birth = combine_birth_date_time(date_str, time_str)
        except ValueError:
            continue
        members.append(FamilyEntry(name=name, birth=birth))
    return members
