# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Shared pytest setup: a throw-away SQLite database per test session and a
clean slate before every test.
"""

import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="squarehead-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["EMAIL_SERVICE_URL"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402

from squarehead.core.database import engine, init_schema  # noqa: E402
from squarehead.core.dependencies import (  # noqa: E402
    get_member_repo,
    get_reminder_log_repo,
    get_schedule_repo,
    get_settings_repo,
)

init_schema(engine)


@pytest.fixture(autouse=True)
def reset_state():
    """Empty every table before each test."""
    get_reminder_log_repo().clear()
    get_schedule_repo().clear()
    get_settings_repo().clear()
    get_member_repo().clear()
    yield
