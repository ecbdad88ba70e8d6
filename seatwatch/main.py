# seatwatch/main.py
"""
FastAPI application entry point.
Creates tables, starts the poll/daily-report scheduler, and serves the read API.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger
from seatwatch.routers import health, shops, stats
from seatwatch.database import create_tables
from seatwatch.config import settings
from seatwatch.services.shop_poller import run_poll_cycle, run_daily_report_cycle
from seatwatch.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="SeatWatch Occupancy API",
    description="Venue seat occupancy snapshots and daily usage rollups.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

scheduler = AsyncIOScheduler()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(shops.router,  prefix="/api/v1", tags=["Shops"])
app.include_router(stats.router,  prefix="/api/v1", tags=["Daily stats"])
app.include_router(health.router, prefix="/api/v1", tags=["Health"])


def schedule_jobs(sched: AsyncIOScheduler):
    sched.add_job(
        run_poll_cycle,
        trigger=IntervalTrigger(minutes=settings.POLL_INTERVAL_MINUTES),
        id="poll_cycle",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    sched.add_job(
        run_daily_report_cycle,
        trigger=CronTrigger(hour=settings.DAILY_REPORT_HOUR, minute=settings.DAILY_REPORT_MINUTE),
        id="daily_report",
        replace_existing=True,
        max_instances=1,
    )


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 SeatWatch starting up...")
    create_tables()
    logger.info("✅ Database tables ready")
    logger.info(f"🏪 Shops configured: {settings.SHOP_CODES}")

    if settings.SCHEDULER_ENABLED:
        schedule_jobs(scheduler)
        scheduler.start()
        logger.info(
            f"⏱  Polling every {settings.POLL_INTERVAL_MINUTES} min, daily report at "
            f"{settings.DAILY_REPORT_HOUR:02d}:{settings.DAILY_REPORT_MINUTE:02d}"
        )
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 SeatWatch shutting down...")
    if scheduler.running:
        scheduler.shutdown(wait=False)
