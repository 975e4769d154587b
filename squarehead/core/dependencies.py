# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection — wire repositories and services.
"""

from squarehead.core.database import engine
from squarehead.repositories.member_repository import MemberRepository
from squarehead.repositories.reminder_log_repository import ReminderLogRepository
from squarehead.repositories.schedule_repository import ScheduleRepository
from squarehead.repositories.settings_repository import SettingsRepository
from squarehead.services.email_client import EmailClient
from squarehead.services.member_service import MemberService
from squarehead.services.reminder_service import ReminderService
from squarehead.services.schedule_service import ScheduleService
from squarehead.services.settings_service import SettingsService

# ── Singleton repository instances (SQL-backed) ──
_member_repo = MemberRepository(engine)
_schedule_repo = ScheduleRepository(engine)
_settings_repo = SettingsRepository(engine)
_reminder_log_repo = ReminderLogRepository(engine)
_email_client = EmailClient()

# ── Service instances (with injected dependencies) ──
_settings_service = SettingsService(settings_repo=_settings_repo)
_member_service = MemberService(
    member_repo=_member_repo,
    schedule_repo=_schedule_repo,
)
_schedule_service = ScheduleService(
    schedule_repo=_schedule_repo,
    member_repo=_member_repo,
    settings_service=_settings_service,
)
_reminder_service = ReminderService(
    schedule_repo=_schedule_repo,
    member_repo=_member_repo,
    settings_service=_settings_service,
    reminder_log_repo=_reminder_log_repo,
    email_client=_email_client,
)


# ── FastAPI dependency functions ──
def get_member_service() -> MemberService:
    return _member_service


def get_schedule_service() -> ScheduleService:
    return _schedule_service


def get_settings_service() -> SettingsService:
    return _settings_service


def get_reminder_service() -> ReminderService:
    return _reminder_service


def get_member_repo() -> MemberRepository:
    return _member_repo


def get_schedule_repo() -> ScheduleRepository:
    return _schedule_repo


def get_settings_repo() -> SettingsRepository:
    return _settings_repo


def get_reminder_log_repo() -> ReminderLogRepository:
    return _reminder_log_repo
