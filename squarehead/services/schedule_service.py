# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Schedule management — current/next schedules, club-night creation,
rotation generation and manual assignment overrides.
Coordinates repository writes with the pure assignment engine.
"""

from collections import Counter
from datetime import date
from typing import Any, Mapping, Optional

from squarehead.core.config import settings
from squarehead.core.logging import get_logger
from squarehead.metrics.prometheus import ASSIGNMENTS_GENERATED, SCHEDULES_GENERATED
from squarehead.models.domain import Assignment, DanceDate, Member, NightType, Schedule
from squarehead.repositories.member_repository import MemberRepository
from squarehead.repositories.schedule_repository import (
    SCHEDULE_NEXT,
    ScheduleRepository,
)
from squarehead.services import assignment_engine
from squarehead.services.dates import club_nights, format_roster_date
from squarehead.services.errors import (
    AssignmentValidationError,
    InsufficientMembers,
    InvalidScheduleDates,
    NotFoundError,
)
from squarehead.services.pairing import are_partners, format_pair_names
from squarehead.services.settings_service import SettingsService

logger = get_logger(__name__)

FIFTH_WEDNESDAY_LINE = "The Board for 5th Wednesday!"


def assignment_view(assignment: Assignment, directory: Mapping[int, Member]) -> dict[str, Any]:
    """Assignment record enriched with squarehead names and derived status."""

    def name(member_id: Optional[int]) -> Optional[str]:
        member = directory.get(member_id) if member_id is not None else None
        return member.display_name if member else None

    return {
        "id": assignment.id,
        "schedule_id": assignment.schedule_id,
        "dance_date": assignment.dance_date.isoformat(),
        "night_type": assignment.night_type.value,
        "squarehead1_id": assignment.squarehead1_id,
        "squarehead2_id": assignment.squarehead2_id,
        "squarehead1_name": name(assignment.squarehead1_id),
        "squarehead2_name": name(assignment.squarehead2_id),
        "notes": assignment.notes,
        "status": assignment.status.value,
    }


class ScheduleService:
    """Business logic for squarehead schedules."""

    def __init__(
        self,
        schedule_repo: ScheduleRepository,
        member_repo: MemberRepository,
        settings_service: SettingsService,
    ) -> None:
        self._schedules = schedule_repo
        self._members = member_repo
        self._settings = settings_service

    # ── Queries ──

    def get_current(self) -> dict[str, Any]:
        return self._view(self._schedules.get_current())

    def get_next(self) -> dict[str, Any]:
        return self._view(self._schedules.get_next())

    def get_schedule(self, schedule_id: int) -> Schedule:
        schedule = self._schedules.get_schedule(schedule_id)
        if schedule is None:
            raise NotFoundError(f"Schedule {schedule_id} not found")
        return schedule

    def roster_text(self, schedule_id: int) -> str:
        """Plain-text roster, one line per club night."""
        self.get_schedule(schedule_id)
        directory = self._directory()
        lines: list[str] = []
        for assignment in self._schedules.list_assignments(schedule_id):
            label = format_roster_date(assignment.dance_date)
            if assignment.night_type == NightType.FIFTH_WEDNESDAY:
                lines.append(f"{label}: {FIFTH_WEDNESDAY_LINE}")
                continue
            view = assignment_view(assignment, directory)
            name1 = view["squarehead1_name"] or ""
            name2 = view["squarehead2_name"] or ""
            if not name1 and not name2:
                lines.append(f"{label}: Unassigned")
                continue
            partners = are_partners(
                assignment.squarehead1_id, assignment.squarehead2_id, directory
            )
            lines.append(f"{label}: {format_pair_names(name1, name2, partners)}")
        return "\n".join(lines)

    # ── Commands ──

    def create_next_schedule(self, name: str, start_date: date, end_date: date) -> dict[str, Any]:
        """Replace the next schedule with empty nights on the club day. Raises ValueError."""
        if start_date > end_date:
            raise ValueError("End date must be on or after start date")
        nights = club_nights(start_date, end_date, self._settings.get_club_day())
        schedule_id = self._schedules.create_schedule(
            name=name,
            schedule_type=SCHEDULE_NEXT,
            start_date=start_date,
            end_date=end_date,
            dates=nights,
        )
        logger.info(
            "Next schedule created: id=%s, range=%s..%s, nights=%d",
            schedule_id, start_date.isoformat(), end_date.isoformat(), len(nights),
        )
        return self._view(self._schedules.get_schedule(schedule_id))

    def add_dates(self, start_date: date, end_date: date) -> dict[str, Any]:
        """Extend the next schedule with club nights it does not have yet."""
        if start_date > end_date:
            raise ValueError("End date must be on or after start date")
        schedule = self._schedules.get_next()
        if schedule is None:
            raise NotFoundError("No next schedule exists to add dates to")

        nights = club_nights(start_date, end_date, self._settings.get_club_day())
        added = self._schedules.create_assignments(schedule.id, nights)

        changes: dict[str, Any] = {}
        if end_date > schedule.end_date:
            changes["end_date"] = end_date
        if start_date < schedule.start_date:
            changes["start_date"] = start_date
        if changes:
            self._schedules.update_schedule(schedule.id, changes)

        logger.info("Dates added to next schedule: id=%s, added=%d", schedule.id, len(added))
        view = self._view(self._schedules.get_schedule(schedule.id))
        directory = self._directory()
        view["new_assignments"] = [assignment_view(a, directory) for a in added]
        view["added_count"] = len(added)
        return view

    def generate(self, lookback_days: Optional[int] = None) -> dict[str, Any]:
        """
        Run the rotation over every night of the next schedule and persist it.
        Raises NotFoundError, InvalidScheduleDates or InsufficientMembers; on
        failure nothing is written.
        """
        schedule = self._schedules.get_next()
        if schedule is None:
            raise NotFoundError("No next schedule to generate")

        nights = self._schedules.list_assignments(schedule.id)
        dates = [DanceDate(date=a.dance_date, night_type=a.night_type) for a in nights]
        if not dates:
            SCHEDULES_GENERATED.labels(outcome="failed").inc()
            raise InvalidScheduleDates("The next schedule has no dance dates")
        prior = self._schedules.list_assignments_before(
            dates[0].date, exclude_schedule_id=schedule.id
        )
        if lookback_days is None:
            lookback_days = settings.ROTATION_LOOKBACK_DAYS or None

        try:
            proposals = assignment_engine.generate(
                dates, self._members.list_members(), prior, lookback_days=lookback_days
            )
        except InsufficientMembers:
            SCHEDULES_GENERATED.labels(outcome="failed").inc()
            logger.warning("Schedule generation refused: schedule=%s, not enough members", schedule.id)
            raise

        self._schedules.save_assignments(schedule.id, proposals)

        by_status = Counter(p.status.value for p in proposals)
        for status, count in by_status.items():
            ASSIGNMENTS_GENERATED.labels(status=status).inc(count)
        SCHEDULES_GENERATED.labels(outcome="ok").inc()
        logger.info(
            "Schedule generated: id=%s, nights=%d, prior=%d, statuses=%s",
            schedule.id, len(proposals), len(prior), dict(by_status),
        )

        view = self._view(self._schedules.get_schedule(schedule.id))
        view["summary"] = {
            "complete": by_status.get("complete", 0),
            "partial": by_status.get("partial", 0),
            "unassigned": by_status.get("unassigned", 0),
        }
        return view

    def update_assignment(self, assignment_id: int, data: dict[str, Any]) -> dict[str, Any]:
        """Manual override of one night. Raises NotFoundError / AssignmentValidationError."""
        existing = self._schedules.get_assignment(assignment_id)
        if existing is None:
            raise NotFoundError(f"Assignment {assignment_id} not found")
        if not data:
            raise AssignmentValidationError("No valid fields provided for update")

        first = data.get("squarehead1_id", existing.squarehead1_id)
        second = data.get("squarehead2_id", existing.squarehead2_id)
        if first is not None and first == second:
            raise AssignmentValidationError("Squarehead 1 and squarehead 2 must be different members")
        for key in ("squarehead1_id", "squarehead2_id"):
            member_id = data.get(key)
            if member_id is not None and self._members.get_member(member_id) is None:
                raise AssignmentValidationError(f"Member {member_id} does not exist")
        if "night_type" in data:
            data = dict(data, night_type=NightType(data["night_type"]).value)

        self._schedules.update_assignment(assignment_id, data)
        logger.info("Assignment updated: id=%s, fields=%s", assignment_id, sorted(data.keys()))
        return assignment_view(self._schedules.get_assignment(assignment_id), self._directory())

    def delete_assignment(self, assignment_id: int) -> dict[str, Any]:
        existing = self._schedules.get_assignment(assignment_id)
        if existing is None:
            raise NotFoundError(f"Assignment {assignment_id} not found")
        self._schedules.delete_assignment(assignment_id)
        logger.info("Assignment deleted: id=%s, dance_date=%s", assignment_id, existing.dance_date)
        return {
            "deleted_assignment_id": assignment_id,
            "dance_date": existing.dance_date.isoformat(),
        }

    def promote(self) -> dict[str, Any]:
        """Make the next schedule the current one."""
        if self._schedules.get_next() is None:
            raise NotFoundError("No next schedule found to promote")
        self._schedules.promote_next_to_current()
        logger.info("Next schedule promoted to current")
        return self.get_current()

    # ── Internal ──

    def _directory(self) -> dict[int, Member]:
        return {m.id: m for m in self._members.list_members()}

    def _view(self, schedule: Optional[Schedule]) -> dict[str, Any]:
        if schedule is None:
            return {"schedule": None, "assignments": [], "count": 0}
        directory = self._directory()
        assignments = [
            assignment_view(a, directory)
            for a in self._schedules.list_assignments(schedule.id)
        ]
        return {
            "schedule": schedule.model_dump(mode="json"),
            "assignments": assignments,
            "count": len(assignments),
        }
