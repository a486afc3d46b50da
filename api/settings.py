from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from api.dependencies import get_settings_repo, get_email_service
from api.models import (
    AdminSettingsResponse,
    AdminSettingsUpdate,
    SmtpTestRequest,
    SmtpTestResponse,
)
from api.services.email_service import EmailService
from db.repositories.settings_repository import SettingsRepository, ADMIN_EMAIL, ADMIN_PASSWORD
import logging

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)
logger = logging.getLogger(__name__)


def _admin_settings(settings_repo: SettingsRepository) -> AdminSettingsResponse:
    return AdminSettingsResponse(
        admin_email=settings_repo.get_setting(ADMIN_EMAIL),
        password_configured=bool(settings_repo.get_setting(ADMIN_PASSWORD)),
    )


@router.get("/settings", response_model=AdminSettingsResponse)
def get_settings(settings_repo: SettingsRepository = Depends(get_settings_repo)):
    return _admin_settings(settings_repo)


@router.put("/settings", response_model=AdminSettingsResponse)
def update_settings(
    settings: AdminSettingsUpdate,
    settings_repo: SettingsRepository = Depends(get_settings_repo),
):
    settings_repo.set_setting(ADMIN_EMAIL, settings.admin_email)
    if settings.admin_password:  # Only update password if provided
        settings_repo.set_setting(ADMIN_PASSWORD, settings.admin_password, is_secret=True)
    logger.info("Admin notification settings saved.")
    return _admin_settings(settings_repo)


@router.post("/settings/test-email", response_model=SmtpTestResponse)
@limiter.limit("5/minute")  # Each attempt is a real SMTP login
def send_test_email(
    request: Request,
    payload: SmtpTestRequest,
    email_service: EmailService = Depends(get_email_service),
):
    success, message = email_service.send_test_email(payload.email, payload.password)
    return SmtpTestResponse(success=success, message=message)
