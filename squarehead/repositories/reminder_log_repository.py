# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Send log for reminder e-mails.
One row per (member, dance date, days-until) so a re-run of the daily job
never e-mails the same reminder twice.
"""

from datetime import date

from sqlalchemy import delete, func, insert, select
from sqlalchemy.engine import Engine

from squarehead.core.database import reminder_log
from squarehead.core.logging import get_logger

logger = get_logger(__name__)


class ReminderLogRepository:
    """SQL-backed reminder send log."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def has_sent(self, member_id: int, dance_date: date, days_until: int) -> bool:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(reminder_log.c.id).where(
                    reminder_log.c.member_id == member_id,
                    reminder_log.c.dance_date == dance_date,
                    reminder_log.c.days_until == days_until,
                    reminder_log.c.status == "sent",
                )
            ).first()
        return row is not None

    def record(
        self,
        member_id: int,
        dance_date: date,
        days_until: int,
        recipient: str,
        status: str,
    ) -> None:
        """Store the outcome; a failed attempt is overwritten by a later one."""
        with self._engine.begin() as conn:
            conn.execute(
                delete(reminder_log).where(
                    reminder_log.c.member_id == member_id,
                    reminder_log.c.dance_date == dance_date,
                    reminder_log.c.days_until == days_until,
                    reminder_log.c.status != "sent",
                )
            )
            already_sent = conn.execute(
                select(reminder_log.c.id).where(
                    reminder_log.c.member_id == member_id,
                    reminder_log.c.dance_date == dance_date,
                    reminder_log.c.days_until == days_until,
                )
            ).first()
            if already_sent is not None:
                logger.info(
                    "Reminder already logged: member=%s, dance_date=%s, days_until=%d",
                    member_id, dance_date.isoformat(), days_until,
                )
                return
            conn.execute(
                insert(reminder_log).values(
                    member_id=member_id,
                    dance_date=dance_date,
                    days_until=days_until,
                    recipient=recipient,
                    status=status,
                )
            )

    def count(self) -> int:
        with self._engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(reminder_log)).scalar() or 0

    def clear(self) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(reminder_log))
