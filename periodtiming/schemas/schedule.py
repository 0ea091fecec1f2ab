"""
Pydantic schemas for the daily period template:
period definitions, break definitions, the schedule aggregate and its derived views.
"""

import re
from enum import Enum
from datetime import time
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator


class PeriodKind(str, Enum):
    CLASS = "class"
    ASSEMBLY = "assembly"
    BREAK = "break"


class MoveDirection(str, Enum):
    UP = "up"
    DOWN = "down"


class ScheduleState(str, Enum):
    LOADED = "loaded"
    DIRTY = "dirty"


class CheckStatus(str, Enum):
    CLEAN = "clean"
    FIXED = "fixed"


CLOCK_PATTERN = re.compile(r"(\d{2}):(\d{2})(?::(\d{2}))?")


def parse_clock(value: Any) -> time:
    """Accept "HH:MM", "HH:MM:SS" or a time object."""
    if isinstance(value, time):
        return value
    match = CLOCK_PATTERN.fullmatch(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise ValueError("time must be an 'HH:MM' string")
    hour, minute, second = match.groups()
    return time(int(hour), int(minute), int(second or 0))


# ---- Period template ----
class PeriodDefinition(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    period: int = Field(ge=1)
    duration_minutes: int = Field(gt=0, validation_alias=AliasChoices("duration_minutes", "duration"))
    name: str
    kind: PeriodKind = Field(default=PeriodKind.CLASS, validation_alias=AliasChoices("kind", "type"))

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be empty")
        return v


class BreakDefinition(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    period: int = Field(ge=1)
    duration_minutes: int = Field(gt=0, validation_alias=AliasChoices("duration_minutes", "duration"))
    name: str = "Break Period"

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be empty")
        return v


class ScheduleConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day_start_time: str = Field(default="08:00", validation_alias=AliasChoices("day_start_time", "assembly_time"))
    assembly_duration_minutes: int = Field(default=15, gt=0)
    total_periods_per_day: int = Field(default=8, ge=1)
    default_period_duration_minutes: int = Field(
        default=45,
        gt=0,
        validation_alias=AliasChoices("default_period_duration_minutes", "period_duration_minutes"),
    )
    period_definitions: List[PeriodDefinition] = Field(
        default_factory=list,
        validation_alias=AliasChoices("period_definitions", "period_durations"),
    )
    break_periods: List[BreakDefinition] = Field(default_factory=list)

    @field_validator("day_start_time", mode="before")
    @classmethod
    def _normalise_start(cls, v: Any) -> str:
        return parse_clock(v).strftime("%H:%M")


# ---- Derived views ----
class ClockTime(BaseModel):
    period: int
    name: str
    kind: PeriodKind
    start_time: str  # "08:00"
    end_time: str    # "08:45"
    start_minute: int  # minutes since midnight, keeps growing past 24:00
    end_minute: int


class BreakClockTime(BaseModel):
    period: int
    name: str
    duration_minutes: int
    start_time: Optional[str] = None
    end_time: Optional[str] = None


class ScheduleSummary(BaseModel):
    total: int
    count_by_kind: Dict[PeriodKind, int]
    total_duration_minutes: int


class PeriodNumberCheck(BaseModel):
    status: CheckStatus
    duplicates: List[int] = []


class ScheduleValidation(BaseModel):
    period_numbers: PeriodNumberCheck
    duplicate_names: List[str] = []
    can_save: bool


class ScheduleTimingInfo(BaseModel):
    period_times: List[ClockTime]
    break_times: List[BreakClockTime]
    summary: ScheduleSummary


# ---- Request bodies ----
class PeriodAdd(BaseModel):
    kind: PeriodKind = PeriodKind.CLASS
    name: Optional[str] = None
    duration_minutes: Optional[int] = Field(default=None, validation_alias=AliasChoices("duration_minutes", "duration"))
    count: int = 1


class BreakAdd(BaseModel):
    period: Optional[int] = None
    duration_minutes: int = Field(default=15, validation_alias=AliasChoices("duration_minutes", "duration"))
    name: str = "Break Period"


class FieldUpdate(BaseModel):
    field: str
    value: Any = None


class PeriodMove(BaseModel):
    direction: MoveDirection
