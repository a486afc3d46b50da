# api/dependencies.py
from fastapi import Depends
from db.engine import SessionLocal
from sqlalchemy.orm import Session
from db.repositories.site_repository import SiteRepository
from db.repositories.settings_repository import SettingsRepository, CredentialProvider
from api.services.change_feed import SiteChangeFeed, site_changes
from api.services.email_service import EmailService
from api.services.site_service import SiteService
from config import get_smtp_config


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_change_feed() -> SiteChangeFeed:
    return site_changes


def get_site_service(
    db: Session = Depends(get_db),
    change_feed: SiteChangeFeed = Depends(get_change_feed),
):
    site_repo = SiteRepository(db)
    return SiteService(site_repo, on_change=change_feed.notify)


def get_settings_repo(db: Session = Depends(get_db)):
    return SettingsRepository(db)


def get_email_service():
    return EmailService(get_smtp_config(), CredentialProvider(SessionLocal))
