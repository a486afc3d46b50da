import threading
import logging

logger = logging.getLogger(__name__)


class SiteChangeFeed:
    """
    Tells API clients that the site list changed.

    Each notify() bumps a revision number. Clients poll the revision and
    re-fetch the whole site list when it moves.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._revision = 0

    @property
    def revision(self) -> int:
        with self._lock:
            return self._revision

    def notify(self) -> None:
        with self._lock:
            self._revision += 1
            revision = self._revision
        logger.info(f"Site data changed, revision is now {revision}")


site_changes = SiteChangeFeed()
