import os
from urllib.parse import urljoin

# --------------------------------------------------------------------
# Utility
# --------------------------------------------------------------------
def _bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")

# --------------------------------------------------------------------
# Target
# --------------------------------------------------------------------
SCRAPE_URL = os.getenv("SCRAPE_URL", "https://disaster.ipswich.qld.gov.au/")
API_URL = os.getenv("API_URL", "").strip() or urljoin(SCRAPE_URL, "api/updates")
BROWSER_UA = os.getenv(
    "BROWSER_UA",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36",
)

# --------------------------------------------------------------------
# Polling
# --------------------------------------------------------------------
POLL_SECONDS = int(os.getenv("POLL_SECONDS", "60"))
MAX_FAILURES_BEFORE_ALTERNATIVE = int(os.getenv("MAX_FAILURES_BEFORE_ALTERNATIVE", "2"))
MAX_CONSECUTIVE_FAILURES = int(os.getenv("MAX_CONSECUTIVE_FAILURES", "5"))
SUMMARY_INTERVAL_HOURS = float(os.getenv("SUMMARY_INTERVAL_HOURS", "1"))
COMPACT_LOGGING = _bool("COMPACT_LOGGING", "true")

# --------------------------------------------------------------------
# Timeouts
# --------------------------------------------------------------------
NAV_TIMEOUT_MS = int(os.getenv("NAV_TIMEOUT_MS", "30000"))
SELECTOR_TIMEOUT_MS = int(os.getenv("SELECTOR_TIMEOUT_MS", "5000"))
API_TIMEOUT = int(os.getenv("API_TIMEOUT", "8"))
WEBHOOK_TIMEOUT = int(os.getenv("WEBHOOK_TIMEOUT", "15"))

# --------------------------------------------------------------------
# Discord
# --------------------------------------------------------------------
DISCORD_WEBHOOK_URL = os.getenv("DISCORD_WEBHOOK_URL", "").strip()
DISCORD_USERNAME = os.getenv("DISCORD_USERNAME", "Disaster Watch")
DISCORD_AVATAR_URL = os.getenv("DISCORD_AVATAR_URL", "https://i.imgur.com/GQgpIAX.png")

# --------------------------------------------------------------------
# Other
# --------------------------------------------------------------------
DRY_RUN = _bool("DRY_RUN", "false")
