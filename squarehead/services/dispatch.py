# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Notification dispatch decision — pure computation.
Turns reminder hits into per-recipient dispatches, resolving names and
addresses from the member directory and deduplicating per member per night.
"""

from datetime import date
from typing import Sequence

from squarehead.models.domain import (
    Dispatch,
    DispatchPlan,
    Member,
    ReminderHit,
    UnresolvedMember,
)


def build_dispatches(hits: Sequence[ReminderHit], members: Sequence[Member]) -> DispatchPlan:
    """
    Resolve each hit to a Dispatch. Hits whose member is missing are returned
    in ``skipped``; the first hit per (member, dance date) wins.
    """
    directory = {m.id: m for m in members}
    plan = DispatchPlan()
    seen: set[tuple[int, date]] = set()

    for hit in hits:
        key = (hit.member_id, hit.dance_date)
        if key in seen:
            continue
        member = directory.get(hit.member_id)
        if member is None:
            plan.skipped.append(UnresolvedMember(hit=hit))
            continue
        if not member.email:
            plan.skipped.append(UnresolvedMember(hit=hit, reason="member has no email"))
            continue
        seen.add(key)

        partner = (
            directory.get(hit.partner_member_id)
            if hit.partner_member_id is not None
            else None
        )
        plan.dispatches.append(
            Dispatch(
                member_id=member.id,
                recipient_email=member.email,
                member_name=member.display_name,
                dance_date=hit.dance_date,
                days_until=hit.days_until,
                night_type=hit.night_type,
                partner_name=partner.display_name if partner else None,
            )
        )
    return plan
