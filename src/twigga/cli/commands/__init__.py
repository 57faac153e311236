"""Twigga CLI commands and the precondition helpers they share."""

import sys
from typing import NoReturn

import click

from ..platform.exceptions import PlatformAPIError, RateLimitError
from ..platform.types import Profile

NOT_LOGGED_IN = "You need to be authenticated, try 'twigga login'"
NO_ACTIVE_PROJECT = (
    "No active project. Try 'twigga projects' and then 'twigga use <projectId>'"
)


def require_login(profile: Profile) -> bool:
    """Print guidance and return False when the profile has no session."""
    if not profile.is_logged_in:
        click.echo(NOT_LOGGED_IN)
        return False
    return True


def require_project(profile: Profile) -> bool:
    """Print guidance and return False when no project is selected."""
    if not require_login(profile):
        return False
    if not profile.project_id:
        click.echo(NO_ACTIVE_PROJECT)
        return False
    return True


def fail(e: PlatformAPIError) -> NoReturn:
    """Report a service error and exit with status 1."""
    if isinstance(e, RateLimitError):
        click.echo(f"Error: {e.message}", err=True)
        click.echo("Hint: Too many requests. Please wait and try again.", err=True)
    elif e.status_code == 401:
        click.echo(f"Error: {e.message}", err=True)
        click.echo("Hint: Run 'twigga logout' and 'twigga login' again.", err=True)
    else:
        click.echo(f"Error: {e.message}", err=True)
    sys.exit(1)
