from db.models.settings import Settings
from sqlalchemy.orm import Session
from typing import Callable, Optional
import os

ADMIN_EMAIL = "ADMIN_EMAIL"
ADMIN_PASSWORD = "ADMIN_PASSWORD"

SECRET_KEYS = {ADMIN_PASSWORD}


class SettingsRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_setting(self, key: str) -> Optional[str]:
        """Get a setting value, preferring environment variable over database"""
        # Check environment first
        env_value = os.getenv(key)
        if env_value is not None:
            return env_value

        # Fall back to database
        setting = self.db.query(Settings).filter(Settings.key == key).first()
        return setting.value if setting else None

    def set_setting(self, key: str, value: Optional[str], is_secret: bool = False):
        """Set a setting value in database"""
        setting = self.db.query(Settings).filter(Settings.key == key).first()
        if setting:
            setting.value = value
            setting.is_secret = is_secret
        else:
            setting = Settings(key=key, value=value, is_secret=is_secret)
            self.db.add(setting)
        self.db.commit()


class CredentialProvider:
    """
    Resolves admin credentials with a fresh session per lookup.

    Nothing is cached, so credentials changed through the API are picked up
    by the next send without restarting the monitor. Safe to call from the
    cycle's worker threads.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get_credential(self, key: str) -> Optional[str]:
        db = self.session_factory()
        try:
            return SettingsRepository(db).get_setting(key)
        finally:
            db.close()

    def set_credential(self, key: str, value: Optional[str]) -> None:
        db = self.session_factory()
        try:
            SettingsRepository(db).set_setting(key, value, is_secret=key in SECRET_KEYS)
        finally:
            db.close()
