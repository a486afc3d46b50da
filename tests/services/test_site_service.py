"""
Tests for site management and the change feed
"""
import pytest
import threading
from unittest.mock import Mock
from api.services.change_feed import SiteChangeFeed
from api.services.site_service import SiteService
from db.repositories.site_repository import DuplicateSiteError, SiteNotFoundError


class TestSiteService:

    @pytest.fixture
    def site_repo(self):
        return Mock()

    @pytest.fixture
    def on_change(self):
        return Mock()

    @pytest.fixture
    def site_service(self, site_repo, on_change):
        return SiteService(site_repo, on_change=on_change)

    def test_add_site_trims_and_signals(self, site_service, site_repo, on_change):
        site_service.add_site("  https://example.com \n")
        site_repo.add_site.assert_called_once_with("https://example.com")
        on_change.assert_called_once_with()

    @pytest.mark.parametrize("url", ["", "   ", None])
    def test_add_site_rejects_empty_url(self, site_service, site_repo, on_change, url):
        with pytest.raises(ValueError, match="URL cannot be empty"):
            site_service.add_site(url)
        site_repo.add_site.assert_not_called()
        on_change.assert_not_called()

    def test_duplicate_add_does_not_signal(self, site_service, site_repo, on_change):
        site_repo.add_site.side_effect = DuplicateSiteError("URL already exists: x")
        with pytest.raises(DuplicateSiteError):
            site_service.add_site("x")
        on_change.assert_not_called()

    def test_delete_site_signals(self, site_service, site_repo, on_change):
        site_service.delete_site(3)
        site_repo.delete_site.assert_called_once_with(3)
        on_change.assert_called_once_with()

    def test_delete_missing_site_does_not_signal(self, site_service, site_repo, on_change):
        site_repo.delete_site.side_effect = SiteNotFoundError("Site with ID 3 not found.")
        with pytest.raises(SiteNotFoundError):
            site_service.delete_site(3)
        on_change.assert_not_called()

    def test_listener_error_does_not_fail_add(self, site_service, site_repo, on_change):
        on_change.side_effect = RuntimeError("listener gone")
        site = site_service.add_site("https://example.com")
        assert site is site_repo.add_site.return_value

    def test_works_without_listener(self, site_repo):
        SiteService(site_repo).add_site("https://example.com")
        site_repo.add_site.assert_called_once()


class TestSiteChangeFeed:

    def test_revision_starts_at_zero(self):
        assert SiteChangeFeed().revision == 0

    def test_notify_from_many_threads(self):
        feed = SiteChangeFeed()
        threads = [threading.Thread(target=feed.notify) for _ in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert feed.revision == 20
