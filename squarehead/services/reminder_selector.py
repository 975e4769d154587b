# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Reminder selection — pure computation, no I/O, no logging.
Decides which squareheads are due a reminder on a given reference date.
"""

from datetime import date
from typing import Iterable, Sequence

from squarehead.models.domain import Assignment, NightType, ReminderHit
from squarehead.services.dates import days_until
from squarehead.services.errors import InvalidOffset


def validate_offsets(offsets_days: Iterable[int]) -> frozenset[int]:
    offsets: set[int] = set()
    for offset in offsets_days:
        if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0:
            raise InvalidOffset(offset)
        offsets.add(offset)
    return frozenset(offsets)


def select_due(
    reference_date: date,
    assignments: Sequence[Assignment],
    offsets_days: Iterable[int],
) -> list[ReminderHit]:
    """
    Return one hit per assigned squarehead whose dance is exactly one of
    ``offsets_days`` days after ``reference_date`` (0 means the same day).

    Output is ordered by dance date, then slot 1 before slot 2.
    Raises InvalidOffset for a negative offset.
    """
    offsets = validate_offsets(offsets_days)
    hits: list[ReminderHit] = []
    for assignment in assignments:
        if assignment.night_type == NightType.FIFTH_WEDNESDAY:
            continue
        remaining = days_until(reference_date, assignment.dance_date)
        if remaining < 0 or remaining not in offsets:
            continue

        first, second = assignment.squarehead1_id, assignment.squarehead2_id
        if first is not None and first == second:
            second = None
        for slot, member_id, other_id in ((1, first, second), (2, second, first)):
            if member_id is None:
                continue
            hits.append(
                ReminderHit(
                    member_id=member_id,
                    dance_date=assignment.dance_date,
                    days_until=remaining,
                    night_type=assignment.night_type,
                    slot=slot,
                    partner_member_id=other_id,
                )
            )

    hits.sort(key=lambda h: (h.dance_date, h.slot))
    return hits
