# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics — single source of truth for all metric objects.
Imported by services and middleware. Never instantiated in controllers.
"""

from prometheus_client import Counter, Gauge, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "squarehead_requests_total",
    "Total HTTP requests to the squarehead service",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "squarehead_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "squarehead_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Business Metrics (updated by service layer only) ──
SCHEDULES_GENERATED = Counter(
    "squarehead_schedules_generated_total",
    "Total schedule generation runs",
    ["outcome"],
)
ASSIGNMENTS_GENERATED = Counter(
    "squarehead_assignments_generated_total",
    "Assignments proposed by the engine",
    ["status"],
)
REMINDER_HITS = Counter(
    "squarehead_reminder_hits_total",
    "Reminder hits selected",
    ["days_until"],
)
REMINDERS_SENT = Counter(
    "squarehead_reminders_sent_total",
    "Reminder e-mails processed",
    ["status"],
)
DISPATCHES_SKIPPED = Counter(
    "squarehead_dispatches_skipped_total",
    "Reminder hits dropped because the member could not be resolved",
)
ACTIVE_MEMBERS = Gauge(
    "squarehead_members",
    "Members in the directory",
)
