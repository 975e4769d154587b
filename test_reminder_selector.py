# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false

"""
Tests for reminder selection and dispatch building (pure functions).
"""

from datetime import date, timedelta

import pytest

from squarehead.models.domain import (
    Assignment,
    Member,
    MemberStatus,
    NightType,
    ReminderHit,
)
from squarehead.services.dates import parse_reminder_days
from squarehead.services.dispatch import build_dispatches
from squarehead.services.errors import InvalidOffset
from squarehead.services.reminder_selector import select_due

OFFSETS = [14, 7, 3, 1]
REFERENCE = date(2025, 6, 6)


def make_member(member_id, email=None, first="First", last=None):
    return Member(
        id=member_id,
        first_name=f"{first}{member_id}",
        last_name=last or f"Last{member_id}",
        email=email or f"member{member_id}@club.example",
        status=MemberStatus.ASSIGNABLE,
    )


def make_hit(member_id, dance_date=date(2025, 6, 13), days_until=7, slot=1, partner=None):
    return ReminderHit(
        member_id=member_id,
        dance_date=dance_date,
        days_until=days_until,
        night_type=NightType.NORMAL,
        slot=slot,
        partner_member_id=partner,
    )


# ============================================
# selectDue
# ============================================
class TestSelectDue:
    def test_seven_days_out_yields_one_hit(self):
        assignment = Assignment(dance_date=date(2025, 6, 13), squarehead1_id=5)
        hits = select_due(REFERENCE, [assignment], OFFSETS)
        assert len(hits) == 1
        assert hits[0].member_id == 5
        assert hits[0].days_until == 7
        assert hits[0].dance_date == date(2025, 6, 13)

    def test_eight_days_out_yields_nothing(self):
        assignment = Assignment(dance_date=REFERENCE + timedelta(days=8), squarehead1_id=5)
        assert select_due(REFERENCE, [assignment], OFFSETS) == []

    def test_within_range_is_not_enough(self):
        assignment = Assignment(dance_date=REFERENCE + timedelta(days=10), squarehead1_id=5)
        assert select_due(REFERENCE, [assignment], OFFSETS) == []

    def test_one_hit_per_squarehead_with_partner_reference(self):
        assignment = Assignment(
            dance_date=date(2025, 6, 13), squarehead1_id=1, squarehead2_id=2
        )
        hits = select_due(REFERENCE, [assignment], OFFSETS)
        assert [(h.member_id, h.slot, h.partner_member_id) for h in hits] == [
            (1, 1, 2),
            (2, 2, 1),
        ]

    def test_same_member_in_both_slots_reminded_once(self):
        assignment = Assignment(
            dance_date=date(2025, 6, 13), squarehead1_id=3, squarehead2_id=3
        )
        hits = select_due(REFERENCE, [assignment], OFFSETS)
        assert len(hits) == 1
        assert hits[0].member_id == 3
        assert hits[0].partner_member_id is None

    def test_same_day_reminder_with_zero_offset(self):
        assignment = Assignment(dance_date=REFERENCE, squarehead1_id=1)
        hits = select_due(REFERENCE, [assignment], [0])
        assert len(hits) == 1
        assert hits[0].days_until == 0

    def test_past_dances_ignored(self):
        assignment = Assignment(dance_date=REFERENCE - timedelta(days=7), squarehead1_id=1)
        assert select_due(REFERENCE, [assignment], OFFSETS) == []

    def test_fifth_wednesday_never_due(self):
        assignment = Assignment(
            dance_date=REFERENCE + timedelta(days=7),
            night_type=NightType.FIFTH_WEDNESDAY,
            squarehead1_id=1,
            squarehead2_id=2,
        )
        assert select_due(REFERENCE, [assignment], OFFSETS) == []

    def test_unassigned_night_yields_nothing(self):
        assignment = Assignment(dance_date=REFERENCE + timedelta(days=7))
        assert select_due(REFERENCE, [assignment], OFFSETS) == []

    def test_empty_assignments(self):
        assert select_due(REFERENCE, [], OFFSETS) == []

    def test_negative_offset_rejected(self):
        assignment = Assignment(dance_date=REFERENCE + timedelta(days=7), squarehead1_id=1)
        with pytest.raises(InvalidOffset):
            select_due(REFERENCE, [assignment], [7, -1])

    def test_negative_offset_rejected_even_without_assignments(self):
        with pytest.raises(InvalidOffset):
            select_due(REFERENCE, [], [-3])

    def test_ordered_by_date_then_slot(self):
        later = Assignment(dance_date=REFERENCE + timedelta(days=14), squarehead1_id=3, squarehead2_id=4)
        sooner = Assignment(dance_date=REFERENCE + timedelta(days=3), squarehead1_id=1, squarehead2_id=2)
        hits = select_due(REFERENCE, [later, sooner], OFFSETS)
        assert [h.member_id for h in hits] == [1, 2, 3, 4]
        assert [h.days_until for h in hits] == [3, 3, 14, 14]

    def test_repeated_calls_identical(self):
        assignments = [
            Assignment(dance_date=REFERENCE + timedelta(days=d), squarehead1_id=d, squarehead2_id=d + 100)
            for d in (1, 3, 7, 14)
        ]
        first = select_due(REFERENCE, assignments, OFFSETS)
        second = select_due(REFERENCE, assignments, OFFSETS)
        assert first == second
        assert len(first) == 8


class TestParseReminderDays:
    def test_comma_separated(self):
        assert parse_reminder_days("14,7,3,1") == [14, 7, 3, 1]

    def test_whitespace_and_repeats(self):
        assert parse_reminder_days(" 7, 3 ,7,, 1") == [7, 3, 1]

    def test_non_numeric_rejected(self):
        with pytest.raises(InvalidOffset):
            parse_reminder_days("7,soon")

    def test_negative_kept_for_selection_to_reject(self):
        assert parse_reminder_days("7,-1") == [7, -1]


# ============================================
# buildDispatches
# ============================================
class TestBuildDispatches:
    def test_duplicate_member_and_date_kept_once(self):
        hits = [make_hit(1, days_until=7), make_hit(1, days_until=7, slot=2)]
        plan = build_dispatches(hits, [make_member(1)])
        assert len(plan.dispatches) == 1
        assert plan.dispatches[0].member_id == 1
        assert plan.skipped == []

    def test_same_member_on_different_dates_kept(self):
        hits = [make_hit(1), make_hit(1, dance_date=date(2025, 6, 20), days_until=14)]
        plan = build_dispatches(hits, [make_member(1)])
        assert len(plan.dispatches) == 2

    def test_unknown_member_skipped_not_fatal(self):
        hits = [make_hit(1, partner=99), make_hit(99, slot=2, partner=1)]
        plan = build_dispatches(hits, [make_member(1)])
        assert [d.member_id for d in plan.dispatches] == [1]
        assert len(plan.skipped) == 1
        assert plan.skipped[0].hit.member_id == 99
        assert plan.skipped[0].reason == "member not found"

    def test_dispatch_carries_names_and_partner(self):
        members = [
            make_member(1, email="ann@club.example", first="Ann", last="Smith"),
            make_member(2, first="Bob", last="Jones"),
        ]
        plan = build_dispatches([make_hit(1, partner=2)], members)
        dispatch = plan.dispatches[0]
        assert dispatch.recipient_email == "ann@club.example"
        assert dispatch.member_name == "Ann1 Smith"
        assert dispatch.partner_name == "Bob2 Jones"
        assert dispatch.days_until == 7
        assert dispatch.night_type == NightType.NORMAL

    def test_missing_partner_leaves_name_empty(self):
        plan = build_dispatches([make_hit(1, partner=42)], [make_member(1)])
        assert plan.dispatches[0].partner_name is None

    def test_empty_hits(self):
        plan = build_dispatches([], [make_member(1)])
        assert plan.dispatches == []
        assert plan.skipped == []
