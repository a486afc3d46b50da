from db.repositories.site_repository import SiteRepository
from db.models.site import Site
from typing import Callable, Optional
import logging

logger = logging.getLogger(__name__)


class SiteService:
    def __init__(self, site_repo: SiteRepository, on_change: Optional[Callable[[], None]] = None):
        self.site_repo = site_repo
        self.on_change = on_change

    def add_site(self, url: str) -> Site:
        url = (url or "").strip()
        if not url:
            raise ValueError("URL cannot be empty.")
        site = self.site_repo.add_site(url)
        self._changed()
        return site

    def delete_site(self, site_id: int) -> None:
        self.site_repo.delete_site(site_id)
        self._changed()

    def get_site(self, site_id: int) -> Site | None:
        return self.site_repo.get_by_id(site_id)

    def list_sites(self) -> list[Site]:
        return self.site_repo.list_sites()

    def _changed(self) -> None:
        if self.on_change is None:
            return
        try:
            self.on_change()
        except Exception as e:
            logger.error(f"Failed to publish site change: {e}")
