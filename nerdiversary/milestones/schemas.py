from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .kinds import MilestoneEvent


class MilestoneRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    kind: str
    title: str
    description: str
    date: datetime
    category: str
    icon: str
    milestone: str
    is_calendar_based: bool = Field(alias="isCalendarBased")

    @classmethod
    def from_event(cls, event: MilestoneEvent) -> "MilestoneRead":
        return cls(
            id=event.id,
            kind=event.kind.value,
            title=event.title,
            description=event.description,
            date=event.date,
            category=event.category.value,
            icon=event.icon,
            milestone=event.milestone,
            is_calendar_based=event.is_calendar_based,
        )


class MilestoneList(BaseModel):
    birth: datetime
    count: int
    events: List[MilestoneRead]
