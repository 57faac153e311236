"""CLI commands for managing storage buckets."""

import json
from datetime import UTC, datetime

import click

from ..platform.client import PlatformClient
from ..platform.config import BUCKETS_COLLECTION, DATABASE
from ..platform.exceptions import PlatformAPIError
from ..platform.ids import generate_document_id
from ..platform.profile import ensure_profile
from . import fail, require_project


@click.group()
def bucket():
    """Manage storage buckets."""
    pass


@bucket.command("create")
@click.argument("folder")
def create_bucket(folder: str):
    """Create a storage bucket in the active project.

    \b
    Example:
        twigga bucket create assets
    """
    profile = ensure_profile()
    if not require_project(profile):
        return

    client = PlatformClient.from_profile(profile)
    try:
        if client.list_buckets(profile.project_id, folder=folder):
            click.echo(f"Message: folder {folder} exists already!")
            return

        client.create_document(
            DATABASE,
            BUCKETS_COLLECTION,
            {
                "folder": folder,
                "folderId": generate_document_id(),
                "projectId": profile.project_id,
                "createdAt": datetime.now(UTC).isoformat(),
            },
        )
        client.create_bucket(folder)
    except PlatformAPIError as e:
        fail(e)

    click.echo("Message: bucket created")


@click.command("buckets")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_buckets(as_json: bool):
    """List buckets of the active project."""
    profile = ensure_profile()
    if not require_project(profile):
        return

    client = PlatformClient.from_profile(profile)
    try:
        records = client.list_buckets(profile.project_id)
    except PlatformAPIError as e:
        fail(e)

    if as_json:
        click.echo(json.dumps([r.model_dump(by_alias=True) for r in records], indent=2))
        return

    if not records:
        click.echo("No buckets found. Create one with: twigga bucket create <name>")
        return

    click.echo(f"{'FOLDER NAME':<25} {'FOLDER ID':<22}")
    click.echo("-" * 48)
    for record in records:
        click.echo(f"{record.folder:<25} {record.folder_id:<22}")
