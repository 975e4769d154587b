# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Squarehead — duty rotation and reminder e-mails for a square dance club.
Assigns two squareheads to every club night, keeps partners together and
sends the scheduled reminders each day.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from squarehead.controllers import (
    member_controller,
    reminder_controller,
    schedule_controller,
    settings_controller,
    system_controller,
)
from squarehead.core.config import settings
from squarehead.core.database import engine, init_schema
from squarehead.core.dependencies import get_member_repo
from squarehead.core.logging import get_logger
from squarehead.metrics.prometheus import ACTIVE_MEMBERS
from squarehead.middleware import MetricsMiddleware, RequestIDMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI):
    init_schema(engine)
    ACTIVE_MEMBERS.set(get_member_repo().count())
    logger.info(
        "%s v%s started on port %d",
        settings.SERVICE_NAME, settings.SERVICE_VERSION, settings.SERVICE_PORT,
    )
    yield
    engine.dispose()
    logger.info("%s stopped", settings.SERVICE_NAME)


app = FastAPI(
    title="Squarehead Service",
    description="Squarehead duty rotation, club schedules and reminder e-mails.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

# ── Middleware (order matters: last added = first executed) ──
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "internal_server_error", "detail": str(exc)},
    )


# ── Routers ──
app.include_router(system_controller.router)
app.include_router(member_controller.router)
app.include_router(schedule_controller.router)
app.include_router(settings_controller.router)
app.include_router(reminder_controller.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT, log_level="info")
