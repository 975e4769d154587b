# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false

"""
Tests for the squarehead assignment engine (pure rotation logic).
"""

from collections import Counter
from datetime import date, timedelta

import pytest

from squarehead.models.domain import (
    Assignment,
    AssignmentStatus,
    DanceDate,
    Member,
    MemberStatus,
    NightType,
)
from squarehead.services.assignment_engine import RotationState, generate
from squarehead.services.errors import InsufficientMembers, InvalidScheduleDates


# ============================================
# Helpers
# ============================================
def make_member(member_id, partner_id=None, friend_id=None, status=MemberStatus.ASSIGNABLE):
    return Member(
        id=member_id,
        first_name=f"First{member_id}",
        last_name=f"Last{member_id}",
        email=f"member{member_id}@club.example",
        status=status,
        partner_id=partner_id,
        friend_id=friend_id,
    )


def weekly(start, count, night_type=NightType.NORMAL):
    return [
        DanceDate(date=start + timedelta(weeks=i), night_type=night_type)
        for i in range(count)
    ]


def usage(assignments):
    counts = Counter()
    for a in assignments:
        for member_id in (a.squarehead1_id, a.squarehead2_id):
            if member_id is not None:
                counts[member_id] += 1
    return counts


# ============================================
# Scenarios
# ============================================
class TestScenarios:
    def test_three_members_partner_first_then_partial(self):
        members = [
            make_member(1),
            make_member(2, partner_id=1),
            make_member(3),
        ]
        dates = [
            DanceDate(date=date(2025, 6, 4)),
            DanceDate(date=date(2025, 6, 11)),
        ]
        result = generate(dates, members)

        assert [a.dance_date for a in result] == [date(2025, 6, 4), date(2025, 6, 11)]
        assert {result[0].squarehead1_id, result[0].squarehead2_id} == {1, 2}
        assert result[0].status == AssignmentStatus.COMPLETE
        assert result[1].squarehead1_id == 3
        assert result[1].squarehead2_id is None
        assert result[1].status == AssignmentStatus.PARTIAL

    def test_third_night_starts_a_new_cycle(self):
        members = [make_member(1), make_member(2, partner_id=1), make_member(3)]
        result = generate(weekly(date(2025, 6, 4), 3), members)
        assert result[2].status == AssignmentStatus.COMPLETE
        assert 3 not in (result[2].squarehead1_id, result[2].squarehead2_id)


# ============================================
# Rotation fairness
# ============================================
class TestFairness:
    @pytest.mark.parametrize("member_count,date_count", [(4, 10), (5, 9), (6, 13), (7, 20)])
    def test_usage_differs_by_at_most_one(self, member_count, date_count):
        members = [make_member(i) for i in range(1, member_count + 1)]
        result = generate(weekly(date(2025, 1, 1), date_count), members)
        counts = usage(result)
        per_member = [counts.get(m.id, 0) for m in members]
        assert max(per_member) - min(per_member) <= 1

    def test_everyone_used_before_anyone_repeats(self):
        members = [make_member(i) for i in range(1, 7)]
        result = generate(weekly(date(2025, 1, 1), 3), members)
        assert usage(result) == Counter({i: 1 for i in range(1, 7)})

    def test_same_pair_not_repeated_on_consecutive_dates(self):
        members = [make_member(i) for i in range(1, 6)]
        result = generate(weekly(date(2025, 1, 1), 8), members)
        for earlier, later in zip(result, result[1:]):
            assert {earlier.squarehead1_id, earlier.squarehead2_id} != {
                later.squarehead1_id,
                later.squarehead2_id,
            }

    def test_prior_assignments_continue_the_cycle(self):
        members = [make_member(i) for i in range(1, 5)]
        prior = [
            Assignment(
                dance_date=date(2025, 5, 28),
                squarehead1_id=1,
                squarehead2_id=2,
            )
        ]
        result = generate([DanceDate(date=date(2025, 6, 4))], members, prior)
        assert {result[0].squarehead1_id, result[0].squarehead2_id} == {3, 4}

    def test_lookback_window_ignores_older_history(self):
        members = [make_member(i) for i in range(1, 5)]
        prior = [
            Assignment(
                dance_date=date(2025, 1, 1),
                squarehead1_id=1,
                squarehead2_id=2,
            )
        ]
        dates = [DanceDate(date=date(2025, 6, 4))]

        with_history = generate(dates, members, prior)
        windowed = generate(dates, members, prior, lookback_days=30)

        assert {with_history[0].squarehead1_id, with_history[0].squarehead2_id} == {3, 4}
        assert {windowed[0].squarehead1_id, windowed[0].squarehead2_id} == {1, 2}

    def test_lookback_longer_than_calendar_counts_all_history(self):
        members = [make_member(i) for i in range(1, 5)]
        prior = [
            Assignment(
                dance_date=date(2025, 1, 1),
                squarehead1_id=1,
                squarehead2_id=2,
            )
        ]
        result = generate(
            [DanceDate(date=date(2025, 6, 4))], members, prior, lookback_days=1_000_000
        )
        assert {result[0].squarehead1_id, result[0].squarehead2_id} == {3, 4}

    def test_prior_assignments_after_first_date_ignored(self):
        state = RotationState.from_history(
            [1, 2, 3],
            [Assignment(dance_date=date(2025, 7, 2), squarehead1_id=1, squarehead2_id=2)],
            before=date(2025, 6, 4),
        )
        assert state.pool == {1, 2, 3}
        assert state.counts == {1: 0, 2: 0, 3: 0}


# ============================================
# Pairing rules
# ============================================
class TestPairing:
    def test_slots_always_distinct(self):
        members = [make_member(i) for i in range(1, 4)]
        for a in generate(weekly(date(2025, 1, 1), 12), members):
            if a.squarehead1_id is not None and a.squarehead2_id is not None:
                assert a.squarehead1_id != a.squarehead2_id

    def test_partner_preferred_over_rotation(self):
        members = [
            make_member(1, partner_id=4),
            make_member(2),
            make_member(3),
            make_member(4, partner_id=1),
        ]
        result = generate(weekly(date(2025, 1, 1), 2), members)
        assert (result[0].squarehead1_id, result[0].squarehead2_id) == (1, 4)
        assert (result[1].squarehead1_id, result[1].squarehead2_id) == (2, 3)

    def test_friend_preferred_when_no_partner(self):
        members = [
            make_member(1, friend_id=3),
            make_member(2),
            make_member(3),
            make_member(4),
        ]
        result = generate(weekly(date(2025, 1, 1), 2), members)
        assert (result[0].squarehead1_id, result[0].squarehead2_id) == (1, 3)
        assert (result[1].squarehead1_id, result[1].squarehead2_id) == (2, 4)

    def test_partner_beats_friend(self):
        members = [
            make_member(1, partner_id=2, friend_id=3),
            make_member(2, partner_id=1),
            make_member(3),
            make_member(4),
        ]
        result = generate([DanceDate(date=date(2025, 1, 1))], members)
        assert (result[0].squarehead1_id, result[0].squarehead2_id) == (1, 2)

    def test_partner_used_more_recently_yields_to_rotation(self):
        members = [
            make_member(1),
            make_member(2, partner_id=3),
            make_member(3, partner_id=2),
            make_member(4),
        ]
        prior = [
            Assignment(dance_date=date(2025, 5, 21), squarehead1_id=2, squarehead2_id=4),
            Assignment(dance_date=date(2025, 5, 28), squarehead1_id=1, squarehead2_id=3),
        ]
        result = generate([DanceDate(date=date(2025, 6, 4))], members, prior)
        assert (result[0].squarehead1_id, result[0].squarehead2_id) == (2, 4)

    def test_ineligible_partner_not_assigned(self):
        members = [
            make_member(1, partner_id=2),
            make_member(2, partner_id=1, status=MemberStatus.EXEMPT),
            make_member(3),
        ]
        result = generate([DanceDate(date=date(2025, 1, 1))], members)
        assert (result[0].squarehead1_id, result[0].squarehead2_id) == (1, 3)


# ============================================
# Fifth Wednesday & eligibility
# ============================================
class TestFifthWednesday:
    def test_fifth_wednesday_has_empty_slots(self):
        members = [make_member(i) for i in range(1, 5)]
        dates = [
            DanceDate(date=date(2025, 10, 22)),
            DanceDate(date=date(2025, 10, 29), night_type=NightType.FIFTH_WEDNESDAY),
            DanceDate(date=date(2025, 11, 5)),
        ]
        result = generate(dates, members)
        assert result[1].squarehead1_id is None
        assert result[1].squarehead2_id is None
        assert result[1].night_type == NightType.FIFTH_WEDNESDAY
        assert result[1].status == AssignmentStatus.UNASSIGNED

    def test_fifth_wednesday_does_not_advance_rotation(self):
        members = [make_member(i) for i in range(1, 6)]
        normal = [DanceDate(date=date(2025, 10, 22)), DanceDate(date=date(2025, 11, 5))]
        with_fifth = normal[:1] + [
            DanceDate(date=date(2025, 10, 29), night_type=NightType.FIFTH_WEDNESDAY)
        ] + normal[1:]

        plain = generate(normal, members)
        mixed = [a for a in generate(with_fifth, members) if a.night_type == NightType.NORMAL]

        assert [(a.squarehead1_id, a.squarehead2_id) for a in plain] == [
            (a.squarehead1_id, a.squarehead2_id) for a in mixed
        ]

    def test_prior_fifth_wednesday_not_counted(self):
        state = RotationState.from_history(
            [1, 2, 3, 4],
            [
                Assignment(
                    dance_date=date(2025, 10, 29),
                    night_type=NightType.FIFTH_WEDNESDAY,
                    squarehead1_id=1,
                    squarehead2_id=2,
                )
            ],
            before=date(2025, 11, 5),
        )
        assert state.counts == {1: 0, 2: 0, 3: 0, 4: 0}

    def test_non_assignable_members_never_used(self):
        members = [
            make_member(1),
            make_member(2),
            make_member(3, status=MemberStatus.BOOSTER),
            make_member(4, status=MemberStatus.LOA),
            make_member(5, status=MemberStatus.EXEMPT),
        ]
        counts = usage(generate(weekly(date(2025, 1, 1), 6), members))
        assert set(counts) == {1, 2}


# ============================================
# Errors
# ============================================
class TestErrors:
    def test_fewer_than_two_assignable_members(self):
        members = [make_member(1), make_member(2, status=MemberStatus.EXEMPT)]
        with pytest.raises(InsufficientMembers) as exc:
            generate([DanceDate(date=date(2025, 1, 1))], members)
        assert exc.value.available == 1

    def test_no_members(self):
        with pytest.raises(InsufficientMembers):
            generate([DanceDate(date=date(2025, 1, 1))], [])

    def test_empty_dates_rejected(self):
        with pytest.raises(InvalidScheduleDates):
            generate([], [make_member(1), make_member(2)])

    def test_duplicate_dates_rejected(self):
        dates = [DanceDate(date=date(2025, 1, 1)), DanceDate(date=date(2025, 1, 1))]
        with pytest.raises(InvalidScheduleDates):
            generate(dates, [make_member(1), make_member(2)])

    def test_unsorted_dates_come_back_in_order(self):
        dates = [DanceDate(date=date(2025, 1, 15)), DanceDate(date=date(2025, 1, 1))]
        result = generate(dates, [make_member(1), make_member(2), make_member(3)])
        assert [a.dance_date for a in result] == [date(2025, 1, 1), date(2025, 1, 15)]
