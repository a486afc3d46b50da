from dataclasses import dataclass
from typing import Optional
import logging
import requests
from config import (
    NETWORK_CHECK_TIMEOUT_SECONDS,
    NETWORK_CHECK_URL,
    PROBE_MAX_REDIRECTS,
    PROBE_TIMEOUT_SECONDS,
    PROBE_USER_AGENT,
)

logger = logging.getLogger(__name__)

NO_RESPONSE_REASON = "No response received (Timeout or network issue)"


@dataclass(frozen=True)
class ProbeResult:
    up: bool
    reason: Optional[str] = None


def normalize_url(url: str) -> str:
    """Add an http:// scheme to bare hostnames such as ``example.com``."""
    if url.startswith("http://") or url.startswith("https://"):
        return url
    return "http://" + url


def probe(url: str) -> ProbeResult:
    """
    Check a single site with one bounded GET request.

    Any final status in [200, 400) counts as UP. Status codes of 400 and
    above, transport failures and malformed URLs count as DOWN, with a
    short reason suitable for an alert email.
    """
    check_url = normalize_url(url)
    logger.debug(f"Checking {check_url}...")
    try:
        with requests.Session() as session:
            session.max_redirects = PROBE_MAX_REDIRECTS
            response = session.get(
                check_url,
                timeout=PROBE_TIMEOUT_SECONDS,
                allow_redirects=True,
                headers={"User-Agent": PROBE_USER_AGENT},
            )
    except requests.RequestException as e:
        response = getattr(e, "response", None)
        if isinstance(e, requests.TooManyRedirects):
            # The attached response is the last redirect hop, not a final answer
            reason = NO_RESPONSE_REASON
        elif response is not None and response.status_code >= 400:
            reason = f"Status {response.status_code}"
        elif isinstance(e, (requests.ConnectionError, requests.Timeout)):
            reason = NO_RESPONSE_REASON
        else:
            reason = f"Request setup error: {e}"
        logger.warning(f"{url} appears DOWN ({reason})")
        return ProbeResult(up=False, reason=reason)

    if 200 <= response.status_code < 400:
        logger.debug(f"{url} is UP (Status: {response.status_code})")
        return ProbeResult(up=True)

    reason = f"Status {response.status_code}"
    logger.warning(f"{url} appears DOWN ({reason})")
    return ProbeResult(up=False, reason=reason)


def is_network_available() -> bool:
    """
    Tell a local connectivity outage apart from a site outage.

    Only a transport-level failure counts; the response status is ignored.
    """
    logger.debug(f"Checking network connectivity via HEAD request to {NETWORK_CHECK_URL}")
    try:
        requests.head(NETWORK_CHECK_URL, timeout=NETWORK_CHECK_TIMEOUT_SECONDS)
    except requests.Timeout as e:
        logger.warning(
            f"Network connectivity check timed out ({e}). "
            "Connection is slow or blocked."
        )
        return False
    except requests.ConnectionError as e:
        message = str(e)
        if "Name or service not known" in message or "getaddrinfo failed" in message \
                or "Temporary failure in name resolution" in message:
            hint = "DNS resolution failed or there is no network connection"
        elif "Connection refused" in message:
            hint = "connection refused by the check endpoint"
        else:
            hint = "connection error"
        logger.warning(f"Network connectivity check failed: {hint}. {message}")
        return False
    except requests.RequestException as e:
        logger.warning(f"Network connectivity check failed: {e}")
        return False
    logger.info("Network connectivity check successful.")
    return True
