#!/usr/bin/env python3
"""Twigga CLI - manage Twigga projects (auth, storage, hosting)

Usage:
    twigga login
    twigga logout
    twigga projects
    twigga project
    twigga use <projectId>
    twigga bucket create <name>
    twigga buckets
    twigga storage upload|list|url|delete
    twigga deploy <dir>
"""

import sys
from importlib.metadata import version

import click
import requests

from .commands import login, logout
from .commands.buckets import bucket, list_buckets
from .commands.deploy import deploy
from .commands.projects import active_project, list_projects, use_project
from .commands.storage import storage
from .platform.exceptions import PlatformAPIError, RateLimitError, TwiggaError
from .utils import configure_logging


@click.group()
@click.version_option(version=version("twigga"))
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """Twigga CLI - manage Twigga projects (auth, storage, hosting)"""
    configure_logging(verbose)


# Authentication
cli.add_command(login.login)
cli.add_command(logout.logout)

# Projects
cli.add_command(list_projects)
cli.add_command(active_project)
cli.add_command(use_project)

# Storage
cli.add_command(bucket)
cli.add_command(list_buckets)
cli.add_command(storage)

# Hosting
cli.add_command(deploy)


def main():
    """Main entry point for the CLI."""
    try:
        cli()
    except RateLimitError as e:
        click.echo(f"Error: {e.message}", err=True)
        click.echo("Hint: Too many requests. Please wait and try again.", err=True)
        sys.exit(1)
    except PlatformAPIError as e:
        click.echo(f"Error: {e.message}", err=True)
        hint = {
            401: "Hint: Run 'twigga login' to authenticate.",
            403: "Hint: You don't have permission for this action.",
            404: "Hint: Check the bucket or project name and try again.",
            500: "Hint: This is a server issue. Please try again later.",
            502: "Hint: The server is temporarily unavailable. Please try again later.",
            503: "Hint: The service is temporarily unavailable. Please try again later.",
        }.get(e.status_code)
        if hint:
            click.echo(hint, err=True)
        sys.exit(1)
    except TwiggaError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)
    except requests.RequestException:
        click.echo("Error: Network request failed.", err=True)
        click.echo("Hint: Check your connection and try again.", err=True)
        sys.exit(1)
    except (click.Abort, KeyboardInterrupt):
        click.echo(err=True)
        sys.exit(130)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        click.echo(
            "Hint: If this persists, try updating with 'pip install -U twigga'.",
            err=True,
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
