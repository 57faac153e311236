"""Open URLs in the user's default browser."""

import logging
import subprocess
import sys

from .config import BROWSER_TIMEOUT

logger = logging.getLogger(__name__)


def browser_command(url: str, platform: str = sys.platform) -> list[str]:
    """Return the platform launcher command for ``url``."""
    if platform == "darwin":
        return ["open", url]
    if platform.startswith("win"):
        return ["rundll32", "url.dll,FileProtocolHandler", url]
    return ["xdg-open", url]


def open_browser(url: str, timeout: float = BROWSER_TIMEOUT) -> None:
    """Launch the default browser on ``url``.

    stdout and stderr are inherited from the CLI process.

    Raises:
        OSError: If the launcher is missing.
        subprocess.SubprocessError: If it fails or exceeds ``timeout``.
    """
    cmd = browser_command(url)
    logger.debug("Launching browser: %s", cmd[0])
    subprocess.run(cmd, check=True, timeout=timeout)
