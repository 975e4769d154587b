# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models — pure data structures, NO FastAPI dependency.
Shared by the scheduling core, the repositories and the HTTP schemas.
"""

import datetime as dt
from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MemberStatus(str, Enum):
    ASSIGNABLE = "assignable"
    EXEMPT = "exempt"
    BOOSTER = "booster"
    LOA = "loa"


class NightType(str, Enum):
    NORMAL = "normal"
    FIFTH_WEDNESDAY = "fifthWednesday"


class AssignmentStatus(str, Enum):
    COMPLETE = "complete"
    PARTIAL = "partial"
    UNASSIGNED = "unassigned"


class Member(BaseModel):
    """A club member as seen by the member directory."""
    model_config = ConfigDict(frozen=True)

    id: int
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    status: MemberStatus = MemberStatus.ASSIGNABLE
    partner_id: Optional[int] = None
    friend_id: Optional[int] = None
    phone: Optional[str] = None
    address: Optional[str] = None

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_assignable(self) -> bool:
        return self.status == MemberStatus.ASSIGNABLE


class DanceDate(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: dt.date
    night_type: NightType = NightType.NORMAL


class Assignment(BaseModel):
    """Squarehead duty for one dance date. ``id`` is None until persisted."""

    id: Optional[int] = None
    schedule_id: Optional[int] = None
    dance_date: date
    night_type: NightType = NightType.NORMAL
    squarehead1_id: Optional[int] = None
    squarehead2_id: Optional[int] = None
    notes: Optional[str] = None

    @property
    def status(self) -> AssignmentStatus:
        filled = sum(
            1 for sid in (self.squarehead1_id, self.squarehead2_id) if sid is not None
        )
        if filled == 2:
            return AssignmentStatus.COMPLETE
        if filled == 1:
            return AssignmentStatus.PARTIAL
        return AssignmentStatus.UNASSIGNED


class Schedule(BaseModel):
    id: int
    name: str
    schedule_type: str
    start_date: date
    end_date: date
    is_active: bool = True


class ReminderHit(BaseModel):
    """One squarehead on one dance date that is due a reminder today."""
    model_config = ConfigDict(frozen=True)

    member_id: int
    dance_date: date
    days_until: int
    night_type: NightType
    slot: int
    partner_member_id: Optional[int] = None


class Dispatch(BaseModel):
    """Everything a renderer needs to compose one reminder e-mail."""
    model_config = ConfigDict(frozen=True)

    member_id: int
    recipient_email: str
    member_name: str
    dance_date: date
    days_until: int
    night_type: NightType
    partner_name: Optional[str] = None


class UnresolvedMember(BaseModel):
    """A reminder hit dropped because its member is not in the directory."""
    model_config = ConfigDict(frozen=True)

    hit: ReminderHit
    reason: str = "member not found"


class DispatchPlan(BaseModel):
    dispatches: list[Dispatch] = Field(default_factory=list)
    skipped: list[UnresolvedMember] = Field(default_factory=list)


class RenderedMessage(BaseModel):
    subject: str
    html_body: str
    text_body: str


class SendResult(BaseModel):
    ok: bool
    error: Optional[str] = None
