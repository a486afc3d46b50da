import os

# Storage
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///data/monitor.db")

# Monitoring cycle
CHECK_INTERVAL_SECONDS = int(os.getenv("CHECK_INTERVAL_SECONDS", "60"))
PROBE_TIMEOUT_SECONDS = float(os.getenv("PROBE_TIMEOUT_SECONDS", "10"))
PROBE_MAX_REDIRECTS = int(os.getenv("PROBE_MAX_REDIRECTS", "5"))
PROBE_USER_AGENT = "WebsiteMonitor/1.0"

# Google's lightweight connectivity endpoint, returns 204 with an empty body
NETWORK_CHECK_URL = os.getenv(
    "NETWORK_CHECK_URL", "http://connectivitycheck.gstatic.com/generate_204"
)
NETWORK_CHECK_TIMEOUT_SECONDS = float(os.getenv("NETWORK_CHECK_TIMEOUT_SECONDS", "5"))

# Logging
LOG_FILE = os.getenv("LOG_FILE", "log.txt")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def get_smtp_config() -> dict:
    """Mail relay settings for EmailService.

    Host, port and security mode are deployment configuration; the
    credentials used to log in come from the settings store at send time.
    """
    return {
        "SMTP_HOST": os.getenv("SMTP_HOST", "smtp.gmail.com"),
        "SMTP_PORT": os.getenv("SMTP_PORT", "587"),
        "SMTP_SECURITY": os.getenv("SMTP_SECURITY", "starttls"),
        "SMTP_TIMEOUT": os.getenv("SMTP_TIMEOUT", "30"),
        "SENDER_NAME": os.getenv("SENDER_NAME", "Website Monitor"),
    }
