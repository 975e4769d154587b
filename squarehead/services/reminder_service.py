# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Squarehead reminders — preview and the daily send run.
Chains reminder selection, dispatch building, send-log dedup, rendering
and delivery. A re-run for the same day never e-mails a reminder twice.
"""

from datetime import date, datetime
from typing import Any, Optional

from squarehead.core.logging import get_logger
from squarehead.metrics.prometheus import DISPATCHES_SKIPPED, REMINDER_HITS, REMINDERS_SENT
from squarehead.models.domain import Dispatch, DispatchPlan, ReminderHit
from squarehead.repositories.member_repository import MemberRepository
from squarehead.repositories.reminder_log_repository import ReminderLogRepository
from squarehead.repositories.schedule_repository import ScheduleRepository
from squarehead.services.dispatch import build_dispatches
from squarehead.services.email_client import EmailClient
from squarehead.services.errors import NotFoundError
from squarehead.services.message_renderer import render_reminder
from squarehead.services.reminder_selector import select_due
from squarehead.services.settings_service import SettingsService

logger = get_logger(__name__)


def _hit_view(hit: ReminderHit) -> dict[str, Any]:
    return {
        "member_id": hit.member_id,
        "dance_date": hit.dance_date.isoformat(),
        "days_until": hit.days_until,
        "night_type": hit.night_type.value,
        "slot": hit.slot,
        "partner_member_id": hit.partner_member_id,
    }


def _dispatch_view(dispatch: Dispatch) -> dict[str, Any]:
    return {
        "member_id": dispatch.member_id,
        "recipient_email": dispatch.recipient_email,
        "member_name": dispatch.member_name,
        "dance_date": dispatch.dance_date.isoformat(),
        "days_until": dispatch.days_until,
        "partner_name": dispatch.partner_name,
    }


def _skipped_view(plan: DispatchPlan) -> list[dict[str, Any]]:
    return [dict(_hit_view(s.hit), reason=s.reason) for s in plan.skipped]


class ReminderService:
    """Business logic for squarehead reminder e-mails."""

    def __init__(
        self,
        schedule_repo: ScheduleRepository,
        member_repo: MemberRepository,
        settings_service: SettingsService,
        reminder_log_repo: ReminderLogRepository,
        email_client: EmailClient,
    ) -> None:
        self._schedules = schedule_repo
        self._members = member_repo
        self._settings = settings_service
        self._log = reminder_log_repo
        self._email = email_client

    def today(self) -> date:
        """Current date in the club's configured time zone."""
        return datetime.now(self._settings.get_timezone()).date()

    def preview(self, reference_date: date) -> dict[str, Any]:
        """Show which reminders would go out on ``reference_date``; sends nothing."""
        hits, plan = self._plan(reference_date)
        club = self._settings.club_profile()
        dispatches = []
        for dispatch in plan.dispatches:
            view = _dispatch_view(dispatch)
            view["subject"] = render_reminder(dispatch, club).subject
            dispatches.append(view)
        return {
            "reference_date": reference_date.isoformat(),
            "hits": [_hit_view(h) for h in hits],
            "dispatches": dispatches,
            "skipped": _skipped_view(plan),
            "count": len(dispatches),
        }

    def run_daily(self, reference_date: Optional[date] = None) -> dict[str, Any]:
        """
        Send every reminder due on ``reference_date`` (default: today).
        Raises InvalidOffset when the configured reminder days are broken,
        in which case nothing is sent.
        """
        reference_date = reference_date or self.today()
        hits, plan = self._plan(reference_date)
        club = self._settings.club_profile()

        sent: list[dict[str, Any]] = []
        already_sent: list[dict[str, Any]] = []
        failed: list[dict[str, Any]] = []

        for dispatch in plan.dispatches:
            view = _dispatch_view(dispatch)
            if self._log.has_sent(dispatch.member_id, dispatch.dance_date, dispatch.days_until):
                already_sent.append(view)
                REMINDERS_SENT.labels(status="duplicate").inc()
                continue

            message = render_reminder(dispatch, club)
            result = self._email.send(dispatch, message)
            status = "sent" if result.ok else "failed"
            self._log.record(
                dispatch.member_id,
                dispatch.dance_date,
                dispatch.days_until,
                dispatch.recipient_email,
                status,
            )
            REMINDERS_SENT.labels(status=status).inc()
            if result.ok:
                sent.append(view)
            else:
                failed.append(dict(view, error=result.error))

        logger.info(
            "Reminder run: date=%s, hits=%d, sent=%d, already_sent=%d, failed=%d, skipped=%d",
            reference_date.isoformat(), len(hits), len(sent),
            len(already_sent), len(failed), len(plan.skipped),
        )
        return {
            "reference_date": reference_date.isoformat(),
            "sent": sent,
            "already_sent": already_sent,
            "failed": failed,
            "skipped": _skipped_view(plan),
            "total_hits": len(hits),
        }

    # ── Internal ──

    def _plan(self, reference_date: date) -> tuple[list[ReminderHit], DispatchPlan]:
        schedule = self._schedules.get_current()
        if schedule is None:
            raise NotFoundError("No current schedule found")

        offsets = self._settings.get_reminder_offsets()
        hits = select_due(reference_date, self._schedules.list_assignments(schedule.id), offsets)
        for hit in hits:
            REMINDER_HITS.labels(days_until=str(hit.days_until)).inc()

        plan = build_dispatches(hits, self._members.list_members())
        for skipped in plan.skipped:
            DISPATCHES_SKIPPED.inc()
            logger.warning(
                "Reminder skipped: member=%s, dance_date=%s, reason=%s",
                skipped.hit.member_id, skipped.hit.dance_date.isoformat(), skipped.reason,
            )
        return hits, plan
