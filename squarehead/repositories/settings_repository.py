# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Club settings key/value store.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Engine

from squarehead.core.database import club_settings


class SettingsRepository:
    """SQL-backed key/value settings."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get(self, key: str) -> Optional[str]:
        with self._engine.connect() as conn:
            return conn.execute(
                select(club_settings.c.setting_value).where(club_settings.c.setting_key == key)
            ).scalar()

    def get_all(self) -> dict[str, Optional[str]]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(club_settings.c.setting_key, club_settings.c.setting_value)
                .order_by(club_settings.c.setting_key)
            ).all()
        return {key: value for key, value in rows}

    def set(self, key: str, value: Optional[str]) -> None:
        now = datetime.now(timezone.utc)
        with self._engine.begin() as conn:
            result = conn.execute(
                update(club_settings)
                .where(club_settings.c.setting_key == key)
                .values(setting_value=value, updated_at=now)
            )
            if result.rowcount == 0:
                conn.execute(
                    insert(club_settings).values(setting_key=key, setting_value=value, updated_at=now)
                )

    def clear(self) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(club_settings))
