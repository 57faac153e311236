"""CLI commands for listing and selecting projects."""

import json
import logging

import click

from ..platform.client import PlatformClient
from ..platform.exceptions import PlatformAPIError
from ..platform.hosting import hosting_bucket_name
from ..platform.profile import ensure_profile, save_profile
from . import fail, require_login

logger = logging.getLogger(__name__)


@click.command("projects")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_projects(as_json: bool):
    """List all projects you are a member of."""
    profile = ensure_profile()
    if not require_login(profile):
        return

    client = PlatformClient.from_profile(profile)
    try:
        user = client.get_token_data(profile.token)
        projects = client.list_projects(user.id)
    except PlatformAPIError as e:
        fail(e)

    if as_json:
        click.echo(json.dumps([p.model_dump(by_alias=True) for p in projects], indent=2))
        return

    click.echo(f"List of projects({len(projects)})")
    click.echo("-" * 60)
    click.echo(f"{'PROJECT NAME':<28} {'PROJECT ID':<30}")
    for project in projects:
        marker = "*" if project.project_id == profile.project_id else " "
        click.echo(f"{project.project_name:<28} {project.project_id:<30} {marker}".rstrip())


@click.command("use")
@click.argument("project_id")
def use_project(project_id: str):
    """Set the active project.

    Also makes sure the project's public hosting bucket exists.

    \b
    Example:
        twigga use my-project-id
    """
    profile = ensure_profile()
    if not require_login(profile):
        return

    bucket = hosting_bucket_name(project_id)
    profile.project_id = project_id

    client = PlatformClient.from_profile(profile)
    try:
        client.create_bucket(bucket)
    except PlatformAPIError as e:
        logger.warning("Could not create hosting bucket %s: %s", bucket, e.message)
    try:
        client.set_bucket_policy(bucket, "public")
    except PlatformAPIError as e:
        logger.warning("Could not make %s public: %s", bucket, e.message)

    save_profile(profile)
    click.echo(f"Project is set: {project_id}")


@click.command("project")
def active_project():
    """Show the active project."""
    profile = ensure_profile()
    if not require_login(profile):
        return

    if profile.project_id:
        click.echo(f"Active project with ID: {profile.project_id}")
    else:
        click.echo(
            "No active project. Try 'twigga use <projectId>' or list projects "
            "with 'twigga projects'"
        )
