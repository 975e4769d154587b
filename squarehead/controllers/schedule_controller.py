# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Schedule endpoints — current/next schedules, generation,
assignment overrides, promotion and the plain-text roster.
Thin HTTP layer — delegates ALL logic to ScheduleService.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from starlette.responses import PlainTextResponse

from squarehead.core.dependencies import get_schedule_service
from squarehead.schemas.squarehead import (
    AddDatesRequest,
    AssignmentUpdateRequest,
    GenerateRequest,
    NextScheduleRequest,
)
from squarehead.services.errors import InsufficientMembers
from squarehead.services.schedule_service import ScheduleService

router = APIRouter(prefix="/api/v1", tags=["Schedules"])


# ── Schedules ──

@router.get("/schedules/current")
def get_current_schedule(
    service: ScheduleService = Depends(get_schedule_service),
):
    """The schedule the club is dancing to now."""
    return service.get_current()


@router.get("/schedules/next")
def get_next_schedule(
    service: ScheduleService = Depends(get_schedule_service),
):
    """The schedule being prepared."""
    return service.get_next()


@router.post("/schedules/next", status_code=201)
def create_next_schedule(
    payload: NextScheduleRequest,
    service: ScheduleService = Depends(get_schedule_service),
):
    """Replace the next schedule with one empty night per club day in range."""
    try:
        return service.create_next_schedule(
            name=payload.name,
            start_date=payload.start_date,
            end_date=payload.end_date,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/schedules/next/add-dates")
def add_dates_to_next_schedule(
    payload: AddDatesRequest,
    service: ScheduleService = Depends(get_schedule_service),
):
    try:
        return service.add_dates(start_date=payload.start_date, end_date=payload.end_date)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/schedules/generate")
def generate_schedule(
    payload: Optional[GenerateRequest] = None,
    service: ScheduleService = Depends(get_schedule_service),
):
    """Fill the next schedule's nights from the rotation."""
    lookback_days = payload.lookback_days if payload else None
    try:
        return service.generate(lookback_days=lookback_days)
    except InsufficientMembers as e:
        raise HTTPException(status_code=409, detail=str(e))
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/schedules/promote")
def promote_schedule(
    service: ScheduleService = Depends(get_schedule_service),
):
    """Make the next schedule current."""
    try:
        return service.promote()
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/schedules/{schedule_id}/text", response_class=PlainTextResponse)
def get_schedule_text(
    schedule_id: int,
    service: ScheduleService = Depends(get_schedule_service),
):
    """Roster as plain text, one club night per line."""
    try:
        return PlainTextResponse(service.roster_text(schedule_id))
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


# ── Assignments ──

@router.put("/schedules/assignments/{assignment_id}")
def update_assignment(
    assignment_id: int,
    payload: AssignmentUpdateRequest,
    service: ScheduleService = Depends(get_schedule_service),
):
    """Manually change the squareheads, night type or notes of one night."""
    try:
        return service.update_assignment(assignment_id, payload.model_dump(exclude_unset=True))
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/schedules/assignments/{assignment_id}")
def delete_assignment(
    assignment_id: int,
    service: ScheduleService = Depends(get_schedule_service),
):
    try:
        return service.delete_assignment(assignment_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
