from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from db.models.site import Site, STATUS_UNKNOWN, STATUS_UP, STATUS_DOWN, utcnow
from datetime import datetime
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class DuplicateSiteError(ValueError):
    pass


class SiteNotFoundError(ValueError):
    pass


class SiteRepository:
    def __init__(self, db: Session):
        self.db = db

    def add_site(self, url: str) -> Site:
        if self.get_by_url(url):
            raise DuplicateSiteError(f"URL already exists: {url}")
        site = Site(url=url, status=STATUS_UNKNOWN, last_status_change=utcnow())
        self.db.add(site)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent add of the same URL
            self.db.rollback()
            raise DuplicateSiteError(f"URL already exists: {url}")
        self.db.refresh(site)
        logger.info(f"Site added: {url} (ID: {site.id})")
        return site

    def get_by_id(self, site_id: int) -> Site | None:
        return self.db.query(Site).filter(Site.id == site_id).first()

    def get_by_url(self, url: str) -> Site | None:
        return self.db.query(Site).filter(Site.url == url).first()

    def list_sites(self) -> list[Site]:
        return self.db.query(Site).order_by(Site.url).all()

    def delete_site(self, site_id: int) -> None:
        site = self.get_by_id(site_id)
        if not site:
            logger.warning(f"Attempted to delete non-existent site ID {site_id}")
            raise SiteNotFoundError(f"Site with ID {site_id} not found.")
        self.db.delete(site)
        self.db.commit()
        logger.info(f"Site deleted: ID {site_id}")

    def record_down(self, site_id: int, now: Optional[datetime] = None) -> Site:
        """Mark a site DOWN and stamp the start of the outage."""
        now = now or utcnow()
        return self._update(
            site_id,
            status=STATUS_DOWN,
            last_checked=now,
            last_status_change=now,
            last_down_timestamp=now,
        )

    def record_up(self, site_id: int, now: Optional[datetime] = None) -> Site:
        """Mark a site UP. last_down_timestamp is left as it was."""
        now = now or utcnow()
        return self._update(
            site_id, status=STATUS_UP, last_checked=now, last_status_change=now
        )

    def update_checked_time(self, site_id: int, now: Optional[datetime] = None) -> Site:
        return self._update(site_id, last_checked=now or utcnow())

    def _update(self, site_id: int, **fields) -> Site:
        site = self.get_by_id(site_id)
        if not site:
            raise SiteNotFoundError(f"Site with ID {site_id} not found.")
        for key, value in fields.items():
            setattr(site, key, value)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(site)
        return site
