# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Club settings — validation on write, typed accessors on read.
Acts as the settings provider for reminder offsets, club night and time zone.
"""

import re
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from squarehead.core.config import settings
from squarehead.core.logging import get_logger
from squarehead.repositories.settings_repository import SettingsRepository
from squarehead.services.dates import WEEKDAYS, parse_reminder_days
from squarehead.services.errors import NotFoundError

logger = get_logger(__name__)

# key -> validation rules
ALLOWED_SETTINGS: dict[str, dict[str, Any]] = {
    "club_name": {"max_length": 100},
    "club_subtitle": {"max_length": 200},
    "club_address": {"max_length": 255},
    "club_color": {"pattern": r"^#[0-9A-Fa-f]{6}$"},
    "club_day_of_week": {"enum": tuple(WEEKDAYS)},
    "reminder_days": {"pattern": r"^[0-9]+(,[0-9]+)*$"},
    "email_from_name": {"max_length": 100},
    "email_from_address": {"max_length": 255},
    "email_template_subject": {"max_length": 200},
    "email_template_body": {"max_length": 5000},
    "system_timezone": {"max_length": 50, "timezone": True},
}

CLUB_PROFILE_KEYS: tuple[str, ...] = (
    "club_name",
    "club_address",
    "club_color",
    "email_template_subject",
    "email_template_body",
)


def _validate(key: str, value: str) -> Optional[str]:
    """Return an error message, or None when ``value`` is acceptable for ``key``."""
    rules = ALLOWED_SETTINGS[key]
    if "max_length" in rules and len(value) > rules["max_length"]:
        return f"Value exceeds maximum length of {rules['max_length']} characters"
    if value and "pattern" in rules and not re.match(rules["pattern"], value):
        return "Value does not match required format"
    if value and "enum" in rules and value not in rules["enum"]:
        return "Value must be one of: " + ", ".join(rules["enum"])
    if value and rules.get("timezone"):
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            return f"Unknown time zone '{value}'"
    return None


class SettingsService:
    """Business logic for club settings."""

    def __init__(self, settings_repo: SettingsRepository) -> None:
        self._settings = settings_repo

    # ── Queries ──

    def get_all(self) -> dict[str, Optional[str]]:
        return self._settings.get_all()

    def get(self, key: str) -> Optional[str]:
        if key not in ALLOWED_SETTINGS:
            raise NotFoundError(f"Unknown setting '{key}'")
        return self._settings.get(key)

    def get_reminder_offsets(self) -> list[int]:
        """Configured reminder days; raises InvalidOffset on a malformed value."""
        raw = self._settings.get("reminder_days") or settings.DEFAULT_REMINDER_DAYS
        return parse_reminder_days(raw)

    def get_club_day(self) -> str:
        return self._settings.get("club_day_of_week") or settings.DEFAULT_CLUB_DAY

    def get_timezone(self) -> ZoneInfo:
        name = self._settings.get("system_timezone") or settings.DEFAULT_TIMEZONE
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown time zone %s, falling back to UTC", name)
            return ZoneInfo("UTC")

    def club_profile(self) -> dict[str, Optional[str]]:
        stored = self._settings.get_all()
        return {key: stored.get(key) for key in CLUB_PROFILE_KEYS}

    # ── Commands ──

    def update(self, data: dict[str, Any]) -> dict[str, Any]:
        """
        Validate and store each key independently. Returns the stored values
        and a per-key error map; one bad key does not block the others.
        """
        updated: dict[str, str] = {}
        errors: dict[str, str] = {}
        for key, raw_value in data.items():
            if key not in ALLOWED_SETTINGS:
                errors[key] = f"Setting '{key}' is not allowed"
                continue
            value = "" if raw_value is None else str(raw_value)
            if key == "reminder_days":
                value = re.sub(r"\s+", "", value)
            error = _validate(key, value)
            if error:
                errors[key] = error
                continue
            self._settings.set(key, value)
            updated[key] = value

        if updated:
            logger.info("Settings updated: keys=%s", sorted(updated.keys()))
        if errors:
            logger.warning("Settings rejected: %s", errors)
        return {"updated": updated, "errors": errors}
