from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from api.dependencies import get_db
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint for monitoring and load balancers.
    Returns 200 OK if the application is healthy.
    """
    try:
        # Test database connectivity
        db.execute(text("SELECT 1"))

        # Check if the monitor loop is scheduled (imported from main)
        from main import site_monitor
        monitor_status = "running" if site_monitor and site_monitor.running else "stopped"

        return {
            "status": "healthy",
            "database": "connected",
            "monitor": monitor_status,
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return {
            "status": "unhealthy",
            "error": str(e)
        }
