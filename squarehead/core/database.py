# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Database engine and table definitions (SQLAlchemy Core).
Tables are created on startup; there are no migrations.
"""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    create_engine,
    func,
)
from sqlalchemy.engine import Engine

from squarehead.core.config import settings
from squarehead.core.logging import get_logger

logger = get_logger(__name__)

metadata = MetaData()

members = Table(
    "members",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("first_name", String(100), nullable=False),
    Column("last_name", String(100), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("phone", String(50), nullable=True),
    Column("address", String(255), nullable=True),
    Column("status", String(20), nullable=False, default="assignable"),
    Column("partner_id", Integer, nullable=True),
    Column("friend_id", Integer, nullable=True),
    Column("created_at", DateTime, server_default=func.now()),
    Column("updated_at", DateTime, nullable=True),
)

schedules = Table(
    "schedules",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("schedule_type", String(20), nullable=False),  # current | next
    Column("start_date", Date, nullable=False),
    Column("end_date", Date, nullable=False),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", DateTime, server_default=func.now()),
)

schedule_assignments = Table(
    "schedule_assignments",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "schedule_id",
        Integer,
        ForeignKey("schedules.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("dance_date", Date, nullable=False),
    Column("night_type", String(20), nullable=False, default="normal"),
    Column("squarehead1_id", Integer, nullable=True),
    Column("squarehead2_id", Integer, nullable=True),
    Column("notes", Text, nullable=True),
    Column("updated_at", DateTime, nullable=True),
    UniqueConstraint("schedule_id", "dance_date", name="uq_assignment_date"),
)

club_settings = Table(
    "settings",
    metadata,
    Column("setting_key", String(100), primary_key=True),
    Column("setting_value", Text, nullable=True),
    Column("updated_at", DateTime, server_default=func.now()),
)

reminder_log = Table(
    "reminder_log",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("member_id", Integer, nullable=False),
    Column("dance_date", Date, nullable=False),
    Column("days_until", Integer, nullable=False),
    Column("recipient", String(255), nullable=False),
    Column("status", String(20), nullable=False),
    Column("sent_at", DateTime, server_default=func.now()),
    UniqueConstraint("member_id", "dance_date", "days_until", name="uq_reminder_sent"),
)


def create_db_engine(db_url: str | None = None) -> Engine:
    """Create the SQLAlchemy engine for the configured database."""
    url = db_url or settings.DATABASE_URL
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_recycle=settings.POOL_RECYCLE,
    )


def init_schema(db_engine: Engine) -> None:
    """Create all tables if they don't exist."""
    metadata.create_all(db_engine)
    logger.info("Database schema ready: %d tables", len(metadata.tables))


engine = create_db_engine()
