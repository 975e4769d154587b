# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Member directory data access.
NO business rules here — partner symmetry is enforced by MemberService.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import delete, func, insert, or_, select, update
from sqlalchemy.engine import Connection, Engine

from squarehead.core.database import members
from squarehead.models.domain import Member, MemberStatus


def _row_to_member(row) -> Member:
    return Member(
        id=row["id"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        email=row["email"],
        status=row["status"],
        partner_id=row["partner_id"],
        friend_id=row["friend_id"],
        phone=row["phone"],
        address=row["address"],
    )


class MemberRepository:
    """SQL-backed member storage."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    # ── Read ──

    def list_members(self) -> list[Member]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(members).order_by(members.c.last_name, members.c.first_name, members.c.id)
            ).mappings().all()
        return [_row_to_member(r) for r in rows]

    def list_assignable(self) -> list[Member]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(members)
                .where(members.c.status == MemberStatus.ASSIGNABLE.value)
                .order_by(members.c.last_name, members.c.first_name, members.c.id)
            ).mappings().all()
        return [_row_to_member(r) for r in rows]

    def get_member(self, member_id: int) -> Optional[Member]:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(members).where(members.c.id == member_id)
            ).mappings().first()
        return _row_to_member(row) if row else None

    def find_by_email(self, email: str) -> Optional[Member]:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(members).where(func.lower(members.c.email) == email.strip().lower())
            ).mappings().first()
        return _row_to_member(row) if row else None

    def count(self) -> int:
        with self._engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(members)).scalar() or 0

    # ── Write ──

    def create(self, data: dict[str, Any], conn: Connection | None = None) -> int:
        if conn is None:
            with self._engine.begin() as own:
                return self.create(data, own)
        result = conn.execute(insert(members).values(**data))
        return result.inserted_primary_key[0]

    def update(self, member_id: int, data: dict[str, Any], conn: Connection | None = None) -> None:
        if conn is None:
            with self._engine.begin() as own:
                return self.update(member_id, data, own)
        values = dict(data, updated_at=datetime.now(timezone.utc))
        conn.execute(update(members).where(members.c.id == member_id).values(**values))

    def set_partner(self, member_id: int, partner_id: Optional[int], conn: Connection) -> None:
        conn.execute(
            update(members).where(members.c.id == member_id).values(partner_id=partner_id)
        )

    def clear_partner_links(self, member_ids: list[int], conn: Connection) -> None:
        """Null every partner reference pointing at, or held by, ``member_ids``."""
        conn.execute(
            update(members)
            .where(or_(members.c.partner_id.in_(member_ids), members.c.id.in_(member_ids)))
            .values(partner_id=None)
        )

    def clear_references(self, member_id: int, conn: Connection) -> None:
        conn.execute(
            update(members).where(members.c.partner_id == member_id).values(partner_id=None)
        )
        conn.execute(
            update(members).where(members.c.friend_id == member_id).values(friend_id=None)
        )

    def delete(self, member_id: int, conn: Connection | None = None) -> bool:
        if conn is None:
            with self._engine.begin() as own:
                return self.delete(member_id, own)
        result = conn.execute(delete(members).where(members.c.id == member_id))
        return result.rowcount > 0

    def transaction(self):
        """Context manager yielding a connection inside one transaction."""
        return self._engine.begin()

    # ── Bulk / internal ──

    def clear(self) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(members))
