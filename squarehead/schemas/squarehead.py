# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Request / Response schemas — API contract definitions.
These are Pydantic models used ONLY at the controller (HTTP) boundary.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from squarehead.models.domain import MemberStatus, NightType


# ── Member Schemas ──

class MemberCreateRequest(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    phone: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = Field(default=None, max_length=255)
    status: MemberStatus = MemberStatus.ASSIGNABLE
    partner_id: Optional[int] = None
    friend_id: Optional[int] = None


class MemberUpdateRequest(BaseModel):
    """Partial update model for PUT /api/v1/members/{id}. Send null to clear a link."""
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[str] = Field(default=None, min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    phone: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = Field(default=None, max_length=255)
    status: Optional[MemberStatus] = None
    partner_id: Optional[int] = None
    friend_id: Optional[int] = None


class MemberResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    status: str
    partner_id: Optional[int] = None
    friend_id: Optional[int] = None
    display_name: str


# ── Schedule Schemas ──

class NextScheduleRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    start_date: date
    end_date: date


class AddDatesRequest(BaseModel):
    start_date: date
    end_date: date


class GenerateRequest(BaseModel):
    lookback_days: Optional[int] = Field(
        default=None,
        ge=1,
        description="Only assignments this many days before the first date count toward rotation",
    )


class AssignmentUpdateRequest(BaseModel):
    """Manual override for PUT /api/v1/schedules/assignments/{id}."""
    squarehead1_id: Optional[int] = None
    squarehead2_id: Optional[int] = None
    night_type: Optional[NightType] = None
    notes: Optional[str] = Field(default=None, max_length=1000)


# ── Reminder Schemas ──

class ReminderPreviewRequest(BaseModel):
    test_date: date


class CronRemindersRequest(BaseModel):
    reference_date: Optional[date] = None
