from dataclasses import dataclass, field
from datetime import date
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from urfu_schedule.urfu.errors import ScheduleError


class ScheduleQuery(BaseModel):
    group_id: str
    start_date: date
    end_date: date

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_range(self) -> "ScheduleQuery":
        if self.start_date > self.end_date:
            raise ValueError(
                f"start_date {self.start_date} is after end_date {self.end_date}"
            )
        return self


class ScheduleEvent(BaseModel):
    title: Optional[str]
    date: str
    time_begin: str = Field(..., alias="timeBegin")
    time_end: str = Field(..., alias="timeEnd")
    teacher_name: Optional[str] = Field(..., alias="teacherName")

    load_type: Optional[str] = Field(None, alias="loadType")
    auditory_title: Optional[str] = Field(None, alias="auditoryTitle")
    auditory_location: Optional[str] = Field(None, alias="auditoryLocation")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("load_type", "auditory_title", "auditory_location", mode="before")
    @classmethod
    def display_text(cls, value: Any) -> Optional[str]:
        # display-only fields never fail the decode
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (int, float)):
            return str(value)
        return None


class ScheduleResponse(BaseModel):
    events: List[ScheduleEvent]


class GroupInfo(BaseModel):
    id: str
    title: str

    model_config = ConfigDict(coerce_numbers_to_str=True)


@dataclass
class ScheduleResult:
    events: List[ScheduleEvent] = field(default_factory=list)
    error: Optional[ScheduleError] = None

    @property
    def ok(self) -> bool:
        return self.error is None
