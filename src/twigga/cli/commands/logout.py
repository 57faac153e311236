"""Log out from Twigga.

The `twigga logout` command clears the stored session token and the active
project.

Usage:
    twigga logout
"""

import click

from twigga.cli.platform.profile import clear_session, ensure_profile


@click.command()
def logout() -> None:
    """Log out from Twigga.

    Clears the token, login status and active project in ~/.twigga/config.json.

    Examples:
        twigga logout
    """
    profile = ensure_profile()
    was_logged_in = profile.is_logged_in
    clear_session(profile)
    if was_logged_in:
        click.echo("Logged out successfully.")
    else:
        click.echo("Not logged in.")
