# app/main.py

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
import sys
import time
import psutil

from app.core.config import settings
from app.core.database import test_connection, init_db
from app.core.policy import DEFAULT_RULES
from app.core.rbac import GUARDED_ACTIONS
from app.core.rate_limiter import limiter
from app.core.seeding_logic import seed_all

# Routers
from app.api.endpoints import (
    auth as auth_router,
    account as account_router,
    users as users_router,
    admin as admin_router,
    announcements as announcements_router,
    events as events_router,
    courses as courses_router,
    departments as departments_router,
    permissions as permissions_router,
    queries as queries_router,
    projects as projects_router,
    friends as friends_router,
    messages as messages_router,
    site_config as site_config_router,
    report_formats as report_formats_router,
    reports as reports_router,
    public as public_router,
)

# ------------------------------------------------------------
# LOGURU CONFIGURATION
# ------------------------------------------------------------
logger.remove()
logger.add(
    sys.stdout,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
           "<level>{level}</level> | "
           "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
           "<level>{message}</level>",
    colorize=True,
    backtrace=True,
    diagnose=settings.ENV != "prod",
)

# ------------------------------------------------------------
# FASTAPI APP INIT
# ------------------------------------------------------------
app = FastAPI(
    title="Science & Tech Club Backend",
    version="1.0.0",
    description="Backend service for the Science & Tech Club portal.",
)

START_TIME = time.time()
DB_STATUS = "Connecting..."

# ------------------------------------------------------------
# RATE LIMITER
# ------------------------------------------------------------
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# ------------------------------------------------------------
# HEALTH & METRICS
# ------------------------------------------------------------
@app.get("/api/health", tags=["System"])
async def health():
    try:
        await test_connection()
        database = "Connected"
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        database = "Error"

    return {
        "status": "ok" if database == "Connected" else "degraded",
        "database": database,
        "uptime_seconds": int(time.time() - START_TIME),
    }


@app.get("/api/metrics", tags=["System"])
async def metrics():
    uptime_seconds = int(time.time() - START_TIME)
    cpu_usage = psutil.cpu_percent(interval=None)
    ram_usage = psutil.virtual_memory().percent
    try:
        disk_usage = psutil.disk_usage('/').percent
    except OSError:
        disk_usage = 0

    db_start = time.time()
    try:
        await test_connection()
        current_db_status = "Connected"
        db_latency = round((time.time() - db_start) * 1000, 2)
    except Exception:
        current_db_status = "Error"
        db_latency = 0

    return {
        "status": "Online",
        "version": app.version,
        "cpu": cpu_usage,
        "ram": ram_usage,
        "disk": disk_usage,
        "uptime": uptime_seconds,
        "database": current_db_status,
        "db_latency": db_latency,
        "policy_actions": len(DEFAULT_RULES),
    }


# ------------------------------------------------------------
# CORS CONFIGURATION
# ------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.FRONTEND_URL,
        "http://localhost:5173",
    ],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "*"],
)

# ------------------------------------------------------------
# REGISTER ROUTERS
# ------------------------------------------------------------
app.include_router(auth_router.router)
app.include_router(account_router.router)
app.include_router(users_router.router)
app.include_router(admin_router.router)
app.include_router(announcements_router.router)
app.include_router(events_router.router)
app.include_router(courses_router.router)
app.include_router(departments_router.router)
app.include_router(permissions_router.router)
app.include_router(queries_router.router)
app.include_router(projects_router.router)
app.include_router(friends_router.router)
app.include_router(messages_router.router)
app.include_router(messages_router.ws_router)
app.include_router(site_config_router.router)
app.include_router(report_formats_router.router)
app.include_router(reports_router.router)
app.include_router(public_router.router)


# ------------------------------------------------------------
# APPLICATION STARTUP EVENTS
# ------------------------------------------------------------
@app.on_event("startup")
async def on_startup():
    global DB_STATUS
    logger.info("Starting Science & Tech Club backend...")
    # Unknown actions fail at import in Authorize; this only reports unused rules
    unguarded = sorted(set(DEFAULT_RULES) - GUARDED_ACTIONS)
    if unguarded:
        logger.warning(f"Policy rules with no guarded route: {unguarded}")
    logger.info(f"Policy table: {len(DEFAULT_RULES)} actions, {len(GUARDED_ACTIONS)} guarded by routes.")

    # 1) Database connection test
    try:
        await test_connection()
        DB_STATUS = "Connected"
        logger.success("Database connection established.")
    except Exception:
        DB_STATUS = "Error"
        logger.exception("Startup aborted: Database connection failed.")

    # 2) Tables, then seed data
    if DB_STATUS == "Connected":
        try:
            await init_db()
            logger.success("Database tables ready.")
        except Exception as e:
            logger.warning(f"Table initialization encountered an issue: {e}")

        await seed_all()

    logger.success("Backend startup completed.")


# ------------------------------------------------------------
# ROOT HEALTH CHECK
# ------------------------------------------------------------
@app.get("/", tags=["System"])
async def root():
    return {
        "status": "ok",
        "service": "Science & Tech Club Backend",
        "version": app.version,
        "message": "Backend running successfully",
    }
