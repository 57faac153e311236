"""Authenticate with Twigga.

The `twigga login` command runs the browser login: it asks the service for
an authorization URL, opens it, and waits for the service to redirect the
browser back to a loopback listener carrying the session token.

Usage:
    twigga login
"""

import logging
import subprocess
import sys

import click

from twigga.cli.platform.browser import open_browser
from twigga.cli.platform.callback import CallbackServer
from twigga.cli.platform.client import PlatformClient
from twigga.cli.platform.config import CALLBACK_HOST, CALLBACK_PORT, LOGIN_TIMEOUT
from twigga.cli.platform.exceptions import (
    LoginError,
    NoTokenError,
    PlatformAPIError,
    TwiggaError,
)
from twigga.cli.platform.profile import ensure_profile, save_token

logger = logging.getLogger(__name__)


@click.command()
def login() -> None:
    """Log in to Twigga through your browser.

    The session token is stored in ~/.twigga/config.json.

    Examples:
        twigga login
    """
    profile = ensure_profile()
    if profile.is_logged_in:
        click.echo("Already logged in. Type 'twigga logout' and try 'twigga login' again.")
        return

    client = PlatformClient.from_profile(profile)
    try:
        token = _login_with_browser(client)
        save_token(profile, token)
    except TwiggaError as e:
        click.echo(f"Error: {e.message}", err=True)
        if isinstance(e, PlatformAPIError) and e.status_code == 401 and not client.token:
            click.echo(
                "Hint: No application token is configured. "
                "Set TWIGGA_APP_TOKEN and run 'twigga login' again.",
                err=True,
            )
        sys.exit(1)

    click.echo(click.style("\nAuthenticated successfully!", fg="green"))


def _login_with_browser(client: PlatformClient) -> str:
    """Run the loopback callback flow and return the captured token.

    Args:
        client: Platform API client.

    Raises:
        LoginTimeoutError: If the browser never came back.
        NoTokenError: If the callback carried no token.
    """
    try:
        callback = CallbackServer(CALLBACK_HOST, CALLBACK_PORT)
    except OSError as e:
        raise LoginError(f"cannot listen on port {CALLBACK_PORT}: {e.strerror or e}") from e

    try:
        callback.start()
        auth_url = client.authenticate(callback.redirect_url)

        click.echo("Open the following URL in your browser:")
        click.echo(auth_url)

        try:
            open_browser(auth_url)
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("Browser launch failed: %s", e)
            click.echo("Could not open a browser. Please open the URL above manually.")

        click.echo("\nWaiting for authentication...")
        token = callback.wait_for_token(LOGIN_TIMEOUT)
    finally:
        callback.close()

    if not token:
        raise NoTokenError(
            "no token captured. Check your browser redirect or copy the token manually"
        )
    return token
