from concurrent.futures import ThreadPoolExecutor, wait
from datetime import datetime, timezone
from typing import Callable, Optional
import threading
import logging
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from sqlalchemy.orm import Session
from api.services.email_service import EmailService
from api.services.probe_service import ProbeResult, is_network_available, probe
from config import CHECK_INTERVAL_SECONDS
from db.models.site import Site, STATUS_UP, STATUS_DOWN, as_utc, utcnow
from db.repositories.site_repository import SiteRepository

logger = logging.getLogger(__name__)

JOB_ID = "site_check_cycle"


def down_alert(url: str, reason: Optional[str], now: datetime) -> tuple[str, str]:
    subject = f"ALERT: Website Down - {url}"
    body = (
        f"The website {url} appears to be DOWN.\n"
        f"Reason: {reason or 'Failed check'}\n"
        f"Timestamp: {now.isoformat()}"
    )
    return subject, body


def recovery_alert(url: str, down_since: Optional[datetime], now: datetime) -> tuple[str, str]:
    subject = f"RESOLVED: Website Up - {url}"
    body = f"The website {url} is back UP.\nTimestamp: {now.isoformat()}"
    if down_since is not None:
        body += f"\nDown since: {as_utc(down_since).isoformat()}"
    return subject, body


class SiteMonitor:
    """
    Runs the periodic check cycle over every configured site.

    A cycle is skipped entirely when the host itself looks offline, so a
    local outage never marks every site DOWN. Otherwise each site is probed
    on its own worker thread, its transition is persisted, and the matching
    email is sent before that worker finishes. Consumers get at most one
    on_change call per cycle.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        email_service: Optional[EmailService],
        on_change: Optional[Callable[[], None]] = None,
        prober: Callable[[str], ProbeResult] = probe,
        network_gate: Callable[[], bool] = is_network_available,
        interval_seconds: float = CHECK_INTERVAL_SECONDS,
        scheduler: Optional[BaseScheduler] = None,
    ):
        self.session_factory = session_factory
        self.email_service = email_service
        self.on_change = on_change
        self.prober = prober
        self.network_gate = network_gate
        self.interval_seconds = interval_seconds
        self._owns_scheduler = scheduler is None
        self.scheduler = scheduler if scheduler is not None else BackgroundScheduler()
        self._guard = threading.Lock()
        self._in_flight = False

    @property
    def running(self) -> bool:
        return self.scheduler.get_job(JOB_ID) is not None

    @property
    def in_flight(self) -> bool:
        with self._guard:
            return self._in_flight

    def start(self) -> None:
        if self.running:
            logger.warning("start called, but monitoring is already running.")
            return
        logger.info(f"Starting website monitoring loop. Interval: {self.interval_seconds} seconds.")
        self.scheduler.add_job(
            self.run_cycle,
            "interval",
            seconds=self.interval_seconds,
            id=JOB_ID,
            next_run_time=datetime.now(timezone.utc),  # Run once immediately
            # Overlapping ticks are dropped by the in-flight guard in run_cycle
            max_instances=2,
            coalesce=True,
            misfire_grace_time=None,
        )
        if not self.scheduler.running:
            self.scheduler.start()

    def stop(self) -> None:
        if not self.running:
            logger.info("stop called, but monitoring was not running.")
            return
        logger.info("Stopping website monitoring loop.")
        self.scheduler.remove_job(JOB_ID)
        if self._owns_scheduler and self.scheduler.running:
            # A cycle already in flight keeps going on its worker thread
            self.scheduler.shutdown(wait=False)

    def run_cycle(self) -> bool:
        """
        Run one full check cycle.

        Returns True if any site record was written during the cycle.
        """
        with self._guard:
            if self._in_flight:
                logger.info("Previous monitor cycle still in progress, skipping this one.")
                return False
            self._in_flight = True

        logger.info("--- Starting Monitor Cycle ---")
        wrote = False
        try:
            if not self.network_gate():
                logger.warning(
                    "Network connection check failed. Skipping website monitoring for this cycle."
                )
                return False

            sites = self._list_sites()
            if not sites:
                logger.info("No websites configured to monitor.")
            else:
                wrote = self._check_sites(sites)
                logger.info("All website checks for this cycle completed.")

            if wrote:
                self._signal_change()
            else:
                logger.info("No website updates in this cycle, no change signal sent.")
            return wrote
        except Exception as e:
            logger.exception(f"Error during monitoring cycle: {e}")
            return wrote
        finally:
            with self._guard:
                self._in_flight = False
            logger.info("--- Finished Monitor Cycle ---")

    def _list_sites(self) -> list[Site]:
        db = self.session_factory()
        try:
            return SiteRepository(db).list_sites()
        finally:
            db.close()

    def _check_sites(self, sites: list[Site]) -> bool:
        wrote = False
        with ThreadPoolExecutor(max_workers=len(sites), thread_name_prefix="site-check") as executor:
            futures = {executor.submit(self._check_site, site): site for site in sites}
            done, _ = wait(futures)
        for future in done:
            site = futures[future]
            try:
                wrote = future.result() or wrote
            except Exception as e:
                logger.error(f"Error processing site {site.url} (ID: {site.id}) during check: {e}")
        return wrote

    def _check_site(self, site: Site) -> bool:
        """Probe one site and persist the outcome. Returns True if it wrote."""
        wrote = False
        db = self.session_factory()
        try:
            repo = SiteRepository(db)
            try:
                result = self.prober(site.url)
            except Exception as probe_error:
                # The attempt still counts as a check; status stays as it was
                repo.update_checked_time(site.id)
                wrote = True
                logger.error(
                    f"Probe failed unexpectedly for {site.url} (ID: {site.id}): {probe_error}"
                )
                return wrote

            new_status = STATUS_UP if result.up else STATUS_DOWN
            old_status = site.status
            now = utcnow()

            if new_status == old_status:
                repo.update_checked_time(site.id, now)
                wrote = True
                logger.debug(f"No status change for {site.url} (Still {new_status}). Updated check time.")
                return wrote

            logger.info(f"Status change for {site.url}: {old_status} -> {new_status}")
            if new_status == STATUS_DOWN:
                repo.record_down(site.id, now)
                wrote = True
                self._notify(site, *down_alert(site.url, result.reason, now))
            else:
                repo.record_up(site.id, now)
                wrote = True
                if old_status == STATUS_DOWN:
                    self._notify(site, *recovery_alert(site.url, site.last_down_timestamp, now))
        except Exception as e:
            logger.error(f"Error processing site {site.url} (ID: {site.id}) during check: {e}")
        finally:
            db.close()
        return wrote

    def _notify(self, site: Site, subject: str, body: str) -> None:
        if self.email_service is None:
            logger.warning(f"Email service not configured, skipping notification for {site.url}")
            return
        logger.info(f"Sending notification for {site.url}: {subject}")
        try:
            self.email_service.send_notification(subject, body)
        except Exception as e:
            logger.error(f"Notification for {site.url} (ID: {site.id}) failed: {e}")

    def _signal_change(self) -> None:
        if self.on_change is None:
            logger.info("Site data was updated, but no change listener is registered.")
            return
        logger.info("Site data was updated this cycle. Sending change signal.")
        try:
            self.on_change()
        except Exception as e:
            logger.error(f"Change listener failed: {e}")
