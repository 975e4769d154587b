# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Reminder endpoints — preview and the daily cron trigger.
Thin HTTP layer — delegates ALL logic to ReminderService.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from squarehead.core.dependencies import get_reminder_service
from squarehead.schemas.squarehead import CronRemindersRequest, ReminderPreviewRequest
from squarehead.services.errors import InvalidOffset
from squarehead.services.reminder_service import ReminderService

router = APIRouter(prefix="/api/v1", tags=["Reminders"])


@router.post("/email/test-reminders")
def preview_reminders(
    payload: ReminderPreviewRequest,
    service: ReminderService = Depends(get_reminder_service),
):
    """Which reminders would go out on ``test_date``. Nothing is sent."""
    try:
        return service.preview(payload.test_date)
    except InvalidOffset as e:
        raise HTTPException(status_code=422, detail=str(e))
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/cron/reminders")
def run_reminders(
    payload: Optional[CronRemindersRequest] = None,
    service: ReminderService = Depends(get_reminder_service),
):
    """Daily job: send the reminders due today. Safe to re-run."""
    reference_date = payload.reference_date if payload else None
    try:
        return service.run_daily(reference_date)
    except InvalidOffset as e:
        raise HTTPException(status_code=422, detail=str(e))
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
