from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.events import EVENT_JOB_ERROR
from contextlib import asynccontextmanager
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from api import router as api_router
from api.health import router as health_router
from api.services.change_feed import site_changes
from api.services.email_service import EmailService
from api.services.monitor_service import SiteMonitor
from config import CHECK_INTERVAL_SECONDS, LOG_FILE, LOG_LEVEL, get_smtp_config
from db.engine import SessionLocal
from db.repositories.settings_repository import CredentialProvider
import logging
import os


# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    filename=LOG_FILE,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


scheduler = None
site_monitor = None


def job_error_listener(event):
    logger.error(f"Scheduled job {event.job_id} crashed: {event.exception}")


def init_monitor(scheduler: AsyncIOScheduler) -> SiteMonitor:
    email_service = EmailService(get_smtp_config(), CredentialProvider(SessionLocal))
    return SiteMonitor(
        SessionLocal,
        email_service,
        on_change=site_changes.notify,
        interval_seconds=CHECK_INTERVAL_SECONDS,
        scheduler=scheduler,
    )


def start_monitoring():
    global scheduler, site_monitor
    logger.info("Starting scheduler...")
    scheduler = AsyncIOScheduler()
    scheduler.add_listener(job_error_listener, EVENT_JOB_ERROR)
    site_monitor = init_monitor(scheduler)
    site_monitor.start()


def stop_monitoring():
    if site_monitor:
        site_monitor.stop()
    if scheduler and scheduler.running:
        scheduler.shutdown(wait=False)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Website monitor starting")
    if os.getenv("SKIP_SCHEDULER", "").lower() != "true":
        start_monitoring()
    yield
    stop_monitoring()
    logger.info("Website monitor stopped")


app = FastAPI(title="Website Monitor", lifespan=lifespan)

# Rate limiting setup
limiter = Limiter(key_func=get_remote_address, default_limits=["100/minute"])
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS Configuration - Allow same-origin by default, customize for production
allowed_origins = os.getenv("CORS_ORIGINS", "*").split(",")
if allowed_origins == ["*"]:
    logger.warning(
        "CORS is set to allow all origins (*). "
        "Set CORS_ORIGINS environment variable to restrict origins in production."
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
    max_age=600,
)


# Security headers middleware
@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    return response


app.include_router(health_router)
app.include_router(api_router, prefix="/api")
