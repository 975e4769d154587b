# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Calendar helpers — pure computation, no side effects.
Club-night enumeration, Fifth-Wednesday detection, reminder-day parsing
and the date formats used in rosters and e-mails.
"""

from datetime import date, timedelta
from typing import Iterable

from squarehead.models.domain import DanceDate, NightType
from squarehead.services.errors import InvalidOffset

WEEKDAYS: dict[str, int] = {
    "Monday": 0,
    "Tuesday": 1,
    "Wednesday": 2,
    "Thursday": 3,
    "Friday": 4,
    "Saturday": 5,
    "Sunday": 6,
}


def weekday_number(day_name: str) -> int:
    """Map a weekday name to ``date.weekday()`` numbering. Raises ValueError."""
    try:
        return WEEKDAYS[day_name.strip().capitalize()]
    except KeyError:
        raise ValueError(f"Unknown day of week: {day_name!r}") from None


def is_fifth_week(day: date) -> bool:
    """True when ``day`` is the fifth occurrence of its weekday in the month."""
    return day.day > 28


def night_type_for(day: date) -> NightType:
    return NightType.FIFTH_WEDNESDAY if is_fifth_week(day) else NightType.NORMAL


def club_nights(start: date, end: date, day_name: str) -> list[DanceDate]:
    """Every club night between ``start`` and ``end`` inclusive."""
    target = weekday_number(day_name)
    current = start + timedelta(days=(target - start.weekday()) % 7)
    nights: list[DanceDate] = []
    while current <= end:
        nights.append(DanceDate(date=current, night_type=night_type_for(current)))
        current += timedelta(days=7)
    return nights


def days_until(reference: date, target: date) -> int:
    return (target - reference).days


def parse_reminder_days(raw: str | Iterable[int] | None) -> list[int]:
    """
    Parse a ``"14,7,3,1"`` style setting into integers, preserving order and
    dropping repeats. Negative values are kept so selection can reject them.
    """
    if raw is None:
        return []
    tokens = raw.split(",") if isinstance(raw, str) else list(raw)
    offsets: list[int] = []
    for token in tokens:
        if isinstance(token, str):
            token = token.strip()
            if not token:
                continue
            try:
                value = int(token)
            except ValueError:
                raise InvalidOffset(token) from None
        else:
            value = int(token)
        if value not in offsets:
            offsets.append(value)
    return offsets


def format_dance_date(day: date) -> str:
    """``Wednesday, June 4, 2025``"""
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


def format_roster_date(day: date) -> str:
    """``Wednesday, June 4``"""
    return f"{day:%A}, {day:%B} {day.day}"
