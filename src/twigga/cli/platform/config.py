"""Platform API configuration constants."""

import os
from importlib.metadata import version
from pathlib import Path

DEFAULT_BASE_URL = os.environ.get("TWIGGA_BASE_URL", "https://twiga.bongocloud.co.tz")
DEFAULT_ACCOUNT_URL = os.environ.get(
    "TWIGGA_ACCOUNT_URL", "https://account.bongocloud.co.tz"
)
# Application credential used before a user session exists (auth initiation).
APP_TOKEN = os.environ.get("TWIGGA_APP_TOKEN", "")

TWIGGA_CONFIG_DIR = Path(
    os.environ.get("TWIGGA_CONFIG_DIR", str(Path.home() / ".twigga"))
)
CONFIG_FILE = TWIGGA_CONFIG_DIR / "config.json"

USER_AGENT = f"twigga-cli/{version('twigga')}"
DEFAULT_TIMEOUT = 10 * 60  # seconds

CALLBACK_HOST = "127.0.0.1"
CALLBACK_HOST_V6 = "::1"
CALLBACK_PORT = 53682
LOGIN_TIMEOUT = 120  # seconds
BROWSER_TIMEOUT = 2 * 60  # seconds

SITE_DOMAIN = "apps.bongocloud.co.tz"
MAIN_CHANNEL = "main"

DATABASE = "Twigga"
PROJECTS_COLLECTION = "Projects"
BUCKETS_COLLECTION = "Buckets"
