import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Response

from nerdiversary.utils.timezone import combine_birth_date_time

from .engine import DEFAULT_HORIZON_YEARS, InvalidInput, calculate
from .family import parse_family_param
from .ical import generate_ical
from .schemas import MilestoneList, MilestoneRead

logger = logging.getLogger(__name__)

router = APIRouter()


def _birth_from_query(d: Optional[str], t: Optional[str]):
    if not d:
        raise HTTPException(status_code=400, detail="Missing birth date parameter 'd' (YYYY-MM-DD)")
    try:
        return combine_birth_date_time(d, t)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid birth date or time; expected d=YYYY-MM-DD&t=HH:MM")


@router.get("/milestones", response_model=MilestoneList, response_model_by_alias=True)
def list_milestones(
    d: Optional[str] = None,
    t: Optional[str] = None,
    years: int = Query(DEFAULT_HORIZON_YEARS, ge=1, le=200),
    upcoming: bool = False,
):
    """All milestones for one birth instant, optionally only those still ahead."""
    birth = _birth_from_query(d, t)
    try:
        events = calculate(birth, horizon_years=years, include_past=not upcoming)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    return MilestoneList(
        birth=birth,
        count=len(events),
        events=[MilestoneRead.from_event(event) for event in events],
    )


@router.get("/calendar.ics")
def calendar_feed(
    d: Optional[str] = None,
    t: Optional[str] = None,
    family: Optional[str] = None,
    years: int = Query(DEFAULT_HORIZON_YEARS, ge=1, le=200),
):
    """Subscribable iCalendar feed for one person (``d``/``t``) or a family."""
    if family:
        members = parse_family_param(family)
        if not members:
            raise HTTPException(status_code=400, detail="Invalid family parameter")
        pairs = []
        for member in members:
            try:
                pairs.extend((member.name, event) for event in calculate(member.birth, horizon_years=years))
            except InvalidInput as e:
                raise HTTPException(status_code=400, detail=str(e))
        pairs.sort(key=lambda pair: pair[1].date)
        body = generate_ical(pairs, is_family=True)
        filename = "family-nerdiversaries.ics"
    else:
        birth = _birth_from_query(d, t)
        try:
            events = calculate(birth, horizon_years=years)
        except InvalidInput as e:
            raise HTTPException(status_code=400, detail=str(e))
        body = generate_ical((None, event) for event in events)
        filename = "nerdiversaries.ics"

    logger.info(f"📅 [Calendar] Rendered {filename} ({len(body)} bytes)")
    return Response(
        content=body,
        media_type="text/calendar; charset=utf-8",
        headers={
            "Content-Disposition": f'inline; filename="{filename}"',
            "Cache-Control": "public, max-age=3600",
        },
    )
