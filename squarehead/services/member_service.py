# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Member directory — business logic for member CRUD.
This is the write boundary for pairing invariants: partner links are kept
symmetric, and a member can never be their own partner/friend or have the
same person as both.
"""

from typing import Any, Optional

from sqlalchemy.engine import Connection

from squarehead.core.logging import get_logger
from squarehead.metrics.prometheus import ACTIVE_MEMBERS
from squarehead.models.domain import Member
from squarehead.repositories.member_repository import MemberRepository
from squarehead.repositories.schedule_repository import ScheduleRepository
from squarehead.services.errors import MemberValidationError, NotFoundError

logger = get_logger(__name__)

_UNSET = object()


class MemberService:
    """Business logic for the member directory."""

    def __init__(
        self,
        member_repo: MemberRepository,
        schedule_repo: ScheduleRepository,
    ) -> None:
        self._members = member_repo
        self._schedules = schedule_repo

    # ── Queries ──

    def list_members(self) -> list[Member]:
        return self._members.list_members()

    def list_assignable(self) -> list[Member]:
        return self._members.list_assignable()

    def get_member(self, member_id: int) -> Member:
        member = self._members.get_member(member_id)
        if member is None:
            raise NotFoundError(f"Member {member_id} not found")
        return member

    # ── Commands ──

    def create_member(self, data: dict[str, Any]) -> Member:
        """Create a member. Raises MemberValidationError."""
        data = self._normalise(data)
        self._check_email(data["email"])
        partner_id = data.pop("partner_id", None)
        self._check_links(None, partner_id, data.get("friend_id"))

        with self._members.transaction() as conn:
            member_id = self._members.create(data, conn)
            if partner_id is not None:
                self._link_partners(member_id, partner_id, conn)

        ACTIVE_MEMBERS.set(self._members.count())
        logger.info("Member created: id=%s, partner=%s", member_id, partner_id)
        return self.get_member(member_id)

    def update_member(self, member_id: int, data: dict[str, Any]) -> Member:
        """Apply a partial update. Raises NotFoundError / MemberValidationError."""
        existing = self.get_member(member_id)
        data = self._normalise(data)
        if "email" in data:
            self._check_email(data["email"], member_id)

        partner_change = data.pop("partner_id", _UNSET)
        partner_id = existing.partner_id if partner_change is _UNSET else partner_change
        friend_id = data.get("friend_id", existing.friend_id)
        self._check_links(member_id, partner_id, friend_id)

        with self._members.transaction() as conn:
            if data:
                self._members.update(member_id, data, conn)
            if partner_change is not _UNSET and partner_change != existing.partner_id:
                if partner_change is None:
                    self._members.clear_partner_links([member_id], conn)
                else:
                    self._link_partners(member_id, partner_change, conn)

        logger.info("Member updated: id=%s, fields=%s", member_id, sorted(data.keys()))
        return self.get_member(member_id)

    def delete_member(self, member_id: int) -> dict[str, Any]:
        """Delete a member, clearing partner/friend references and duty slots."""
        self.get_member(member_id)
        with self._members.transaction() as conn:
            self._members.clear_references(member_id, conn)
            self._members.delete(member_id, conn)
        self._schedules.clear_member(member_id)

        ACTIVE_MEMBERS.set(self._members.count())
        logger.info("Member deleted: id=%s", member_id)
        return {"status": "deleted", "id": member_id}

    # ── Internal ──

    @staticmethod
    def _normalise(data: dict[str, Any]) -> dict[str, Any]:
        clean = dict(data)
        if "email" in clean and clean["email"] is not None:
            clean["email"] = clean["email"].strip()
        for key in ("first_name", "last_name"):
            if key in clean and clean[key] is not None:
                clean[key] = clean[key].strip()
        if "status" in clean and clean["status"] is not None:
            clean["status"] = getattr(clean["status"], "value", clean["status"])
        return clean

    def _check_email(self, email: str, member_id: Optional[int] = None) -> None:
        other = self._members.find_by_email(email)
        if other is not None and other.id != member_id:
            raise MemberValidationError(f"Email '{email}' is already used by member {other.id}")

    def _check_links(
        self,
        member_id: Optional[int],
        partner_id: Optional[int],
        friend_id: Optional[int],
    ) -> None:
        if member_id is not None and member_id in (partner_id, friend_id):
            raise MemberValidationError("A member cannot be their own partner or friend")
        if partner_id is not None and partner_id == friend_id:
            raise MemberValidationError("Partner and friend must be different members")
        for label, other_id in (("Partner", partner_id), ("Friend", friend_id)):
            if other_id is not None and self._members.get_member(other_id) is None:
                raise MemberValidationError(f"{label} {other_id} does not exist")
        if partner_id is not None and member_id is not None:
            partner = self._members.get_member(partner_id)
            if partner.friend_id == member_id:
                raise MemberValidationError(
                    f"Member {partner_id} lists member {member_id} as a friend; "
                    "clear it before pairing them as partners"
                )

    def _link_partners(self, member_id: int, partner_id: int, conn: Connection) -> None:
        """Pair two members, releasing whoever either of them was paired with."""
        self._members.clear_partner_links([member_id, partner_id], conn)
        self._members.set_partner(member_id, partner_id, conn)
        self._members.set_partner(partner_id, member_id, conn)
