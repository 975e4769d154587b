# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Schedules and their squarehead assignments.
Encapsulates all reads/writes on ``schedules`` and ``schedule_assignments``.
NO business rules here — pure CRUD.
"""

from datetime import date, datetime, timezone
from typing import Any, Optional, Sequence

from sqlalchemy import and_, delete, insert, select, update
from sqlalchemy.engine import Engine

from squarehead.core.database import schedule_assignments, schedules
from squarehead.models.domain import Assignment, DanceDate, Schedule

SCHEDULE_CURRENT = "current"
SCHEDULE_NEXT = "next"


def _row_to_schedule(row) -> Schedule:
    return Schedule(
        id=row["id"],
        name=row["name"],
        schedule_type=row["schedule_type"],
        start_date=row["start_date"],
        end_date=row["end_date"],
        is_active=bool(row["is_active"]),
    )


def _row_to_assignment(row) -> Assignment:
    return Assignment(
        id=row["id"],
        schedule_id=row["schedule_id"],
        dance_date=row["dance_date"],
        night_type=row["night_type"],
        squarehead1_id=row["squarehead1_id"],
        squarehead2_id=row["squarehead2_id"],
        notes=row["notes"],
    )


class ScheduleRepository:
    """SQL-backed schedule and assignment storage."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    # ── Schedules ──

    def get_active(self, schedule_type: str) -> Optional[Schedule]:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(schedules)
                .where(
                    schedules.c.schedule_type == schedule_type,
                    schedules.c.is_active.is_(True),
                )
                .order_by(schedules.c.id.desc())
                .limit(1)
            ).mappings().first()
        return _row_to_schedule(row) if row else None

    def get_current(self) -> Optional[Schedule]:
        return self.get_active(SCHEDULE_CURRENT)

    def get_next(self) -> Optional[Schedule]:
        return self.get_active(SCHEDULE_NEXT)

    def get_schedule(self, schedule_id: int) -> Optional[Schedule]:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(schedules).where(schedules.c.id == schedule_id)
            ).mappings().first()
        return _row_to_schedule(row) if row else None

    def create_schedule(
        self,
        name: str,
        schedule_type: str,
        start_date: date,
        end_date: date,
        dates: Sequence[DanceDate],
    ) -> int:
        """Deactivate any active schedule of this type, then insert the new one with empty nights."""
        with self._engine.begin() as conn:
            conn.execute(
                update(schedules)
                .where(
                    schedules.c.schedule_type == schedule_type,
                    schedules.c.is_active.is_(True),
                )
                .values(is_active=False)
            )
            schedule_id = conn.execute(
                insert(schedules).values(
                    name=name,
                    schedule_type=schedule_type,
                    start_date=start_date,
                    end_date=end_date,
                    is_active=True,
                )
            ).inserted_primary_key[0]
            if dates:
                conn.execute(
                    insert(schedule_assignments),
                    [
                        {
                            "schedule_id": schedule_id,
                            "dance_date": d.date,
                            "night_type": d.night_type.value,
                        }
                        for d in dates
                    ],
                )
        return schedule_id

    def update_schedule(self, schedule_id: int, data: dict[str, Any]) -> None:
        with self._engine.begin() as conn:
            conn.execute(update(schedules).where(schedules.c.id == schedule_id).values(**data))

    def promote_next_to_current(self) -> bool:
        """Retire the current schedule and relabel the active next one as current."""
        with self._engine.begin() as conn:
            conn.execute(
                update(schedules)
                .where(schedules.c.schedule_type == SCHEDULE_CURRENT)
                .values(is_active=False)
            )
            result = conn.execute(
                update(schedules)
                .where(
                    schedules.c.schedule_type == SCHEDULE_NEXT,
                    schedules.c.is_active.is_(True),
                )
                .values(schedule_type=SCHEDULE_CURRENT)
            )
        return result.rowcount > 0

    # ── Assignments ──

    def list_assignments(self, schedule_id: int) -> list[Assignment]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(schedule_assignments)
                .where(schedule_assignments.c.schedule_id == schedule_id)
                .order_by(schedule_assignments.c.dance_date)
            ).mappings().all()
        return [_row_to_assignment(r) for r in rows]

    def list_assignments_before(self, before: date, exclude_schedule_id: int | None = None) -> list[Assignment]:
        """Assignments dated before ``before`` from schedules that were promoted to current.

        Drafts that were replaced without promotion never ran and are left out.
        """
        query = (
            select(schedule_assignments)
            .join(schedules, schedule_assignments.c.schedule_id == schedules.c.id)
            .where(
                schedule_assignments.c.dance_date < before,
                schedules.c.schedule_type == SCHEDULE_CURRENT,
            )
        )
        if exclude_schedule_id is not None:
            query = query.where(schedule_assignments.c.schedule_id != exclude_schedule_id)
        with self._engine.connect() as conn:
            rows = conn.execute(query.order_by(schedule_assignments.c.dance_date)).mappings().all()
        return [_row_to_assignment(r) for r in rows]

    def create_assignments(self, schedule_id: int, dates: Sequence[DanceDate]) -> list[Assignment]:
        """Insert empty nights for dates the schedule does not have yet."""
        existing = {a.dance_date for a in self.list_assignments(schedule_id)}
        new_dates = [d for d in dates if d.date not in existing]
        if new_dates:
            with self._engine.begin() as conn:
                conn.execute(
                    insert(schedule_assignments),
                    [
                        {
                            "schedule_id": schedule_id,
                            "dance_date": d.date,
                            "night_type": d.night_type.value,
                        }
                        for d in new_dates
                    ],
                )
        added = {d.date for d in new_dates}
        return [a for a in self.list_assignments(schedule_id) if a.dance_date in added]

    def save_assignments(self, schedule_id: int, proposals: Sequence[Assignment]) -> int:
        """Write squarehead slots onto the schedule's nights, matched by dance date."""
        now = datetime.now(timezone.utc)
        saved = 0
        with self._engine.begin() as conn:
            for proposal in proposals:
                result = conn.execute(
                    update(schedule_assignments)
                    .where(
                        and_(
                            schedule_assignments.c.schedule_id == schedule_id,
                            schedule_assignments.c.dance_date == proposal.dance_date,
                        )
                    )
                    .values(
                        squarehead1_id=proposal.squarehead1_id,
                        squarehead2_id=proposal.squarehead2_id,
                        night_type=proposal.night_type.value,
                        updated_at=now,
                    )
                )
                saved += result.rowcount
        return saved

    def get_assignment(self, assignment_id: int) -> Optional[Assignment]:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(schedule_assignments).where(schedule_assignments.c.id == assignment_id)
            ).mappings().first()
        return _row_to_assignment(row) if row else None

    def update_assignment(self, assignment_id: int, data: dict[str, Any]) -> None:
        values = dict(data, updated_at=datetime.now(timezone.utc))
        with self._engine.begin() as conn:
            conn.execute(
                update(schedule_assignments)
                .where(schedule_assignments.c.id == assignment_id)
                .values(**values)
            )

    def delete_assignment(self, assignment_id: int) -> bool:
        with self._engine.begin() as conn:
            result = conn.execute(
                delete(schedule_assignments).where(schedule_assignments.c.id == assignment_id)
            )
        return result.rowcount > 0

    def clear_member(self, member_id: int) -> None:
        """Empty every slot held by ``member_id``."""
        with self._engine.begin() as conn:
            conn.execute(
                update(schedule_assignments)
                .where(schedule_assignments.c.squarehead1_id == member_id)
                .values(squarehead1_id=None)
            )
            conn.execute(
                update(schedule_assignments)
                .where(schedule_assignments.c.squarehead2_id == member_id)
                .values(squarehead2_id=None)
            )

    # ── Bulk / internal ──

    def clear(self) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(schedule_assignments))
            conn.execute(delete(schedules))
