# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Squarehead assignment engine — pure computation, no side effects.

Rotation rules
--------------
* Only ``assignable`` members take duty. Fifth-Wednesday nights get no
  squareheads and do not advance the rotation.
* Every eligible member is used once per cycle before anyone repeats. The
  cycle in progress is rebuilt by replaying prior assignments in date order.
* Inside a cycle candidates are ranked by (prior count, last used date with
  never-used first, id). The top candidate takes slot 1.
* Slot 2 goes, in order of preference, to the slot-1 member's partner
  (unless the partner was used more recently), their friend, or the next
  ranked candidate. When the cycle has no one left the night is partial and
  the following night starts a new cycle.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Mapping, Optional, Sequence

from squarehead.models.domain import Assignment, DanceDate, Member, NightType
from squarehead.services.errors import InsufficientMembers, InvalidScheduleDates
from squarehead.services.pairing import partner_of


@dataclass
class RotationState:
    """Per-member usage counters plus the members still unused this cycle."""

    eligible: tuple[int, ...]
    counts: dict[int, int] = field(default_factory=dict)
    last_used: dict[int, date] = field(default_factory=dict)
    pool: set[int] = field(default_factory=set)

    @classmethod
    def from_history(
        cls,
        eligible: Iterable[int],
        prior: Iterable[Assignment],
        before: date,
        lookback_days: Optional[int] = None,
    ) -> "RotationState":
        state = cls(eligible=tuple(sorted(eligible)))
        state.counts = {mid: 0 for mid in state.eligible}
        # A window reaching past date.min covers all history.
        window_start = date.min
        if lookback_days and lookback_days < (before - date.min).days:
            window_start = before - timedelta(days=lookback_days)
        history = sorted(
            (
                a for a in prior
                if a.night_type == NightType.NORMAL
                and window_start <= a.dance_date < before
            ),
            key=lambda a: a.dance_date,
        )
        used: set[int] = set()
        for assignment in history:
            for member_id in (assignment.squarehead1_id, assignment.squarehead2_id):
                if member_id in state.counts:
                    state.mark_used(member_id, assignment.dance_date)
                    used.add(member_id)
            if used.issuperset(state.eligible):
                used.clear()
        state.pool = set(state.eligible) - used
        return state

    def rank(self, member_ids: Iterable[int]) -> list[int]:
        return sorted(
            member_ids,
            key=lambda mid: (
                self.counts.get(mid, 0),
                self.last_used.get(mid, date.min),
                mid,
            ),
        )

    def mark_used(self, member_id: int, day: date) -> None:
        self.counts[member_id] = self.counts.get(member_id, 0) + 1
        previous = self.last_used.get(member_id)
        if previous is None or day > previous:
            self.last_used[member_id] = day
        self.pool.discard(member_id)

    def used_more_recently(self, member_id: int, than_id: int) -> bool:
        mine = self.last_used.get(member_id)
        theirs = self.last_used.get(than_id)
        if mine is None:
            return False
        if theirs is None:
            return True
        return mine > theirs


def _validate_dates(dates: Sequence[DanceDate]) -> None:
    if not dates:
        raise InvalidScheduleDates("At least one dance date is required")
    seen: set[date] = set()
    for dance in dates:
        if dance.date in seen:
            raise InvalidScheduleDates(f"Duplicate dance date: {dance.date.isoformat()}")
        seen.add(dance.date)


def _pick_second(
    first_id: int,
    remaining: list[int],
    state: RotationState,
    directory: Mapping[int, Member],
) -> Optional[int]:
    if not remaining:
        return None
    first = directory[first_id]
    partner_id = partner_of(first, directory)
    if partner_id in remaining and not state.used_more_recently(partner_id, first_id):
        return partner_id
    if first.friend_id in remaining:
        return first.friend_id
    return remaining[0]


def generate(
    dates: Sequence[DanceDate],
    members: Sequence[Member],
    prior_assignments: Sequence[Assignment] = (),
    lookback_days: Optional[int] = None,
) -> list[Assignment]:
    """
    Propose one Assignment per dance date, in date order.

    Raises InvalidScheduleDates for an empty or repeated date list and
    InsufficientMembers when fewer than two members are assignable. A night
    that cannot be fully staffed comes back partial rather than failing.
    """
    _validate_dates(dates)
    directory = {m.id: m for m in members}
    eligible = [m.id for m in members if m.is_assignable]
    if len(eligible) < 2:
        raise InsufficientMembers(len(eligible))

    ordered = sorted(dates, key=lambda d: d.date)
    state = RotationState.from_history(
        eligible, prior_assignments, before=ordered[0].date, lookback_days=lookback_days
    )

    proposals: list[Assignment] = []
    for dance in ordered:
        if dance.night_type == NightType.FIFTH_WEDNESDAY:
            proposals.append(
                Assignment(dance_date=dance.date, night_type=NightType.FIFTH_WEDNESDAY)
            )
            continue

        if not state.pool:
            state.pool = set(state.eligible)
        candidates = state.rank(state.pool)
        first_id = candidates[0]
        second_id = _pick_second(first_id, candidates[1:], state, directory)

        state.mark_used(first_id, dance.date)
        if second_id is not None:
            state.mark_used(second_id, dance.date)

        proposals.append(
            Assignment(
                dance_date=dance.date,
                night_type=NightType.NORMAL,
                squarehead1_id=first_id,
                squarehead2_id=second_id,
            )
        )
    return proposals
