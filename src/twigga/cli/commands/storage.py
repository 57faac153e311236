"""CLI commands for bucket objects."""

import json
import sys
from pathlib import Path

import click

from ..platform.client import PlatformClient
from ..platform.exceptions import PlatformAPIError
from ..platform.profile import ensure_profile
from ..platform.release import walk_files
from . import fail, require_login


@click.group()
def storage():
    """Upload and manage objects in storage buckets."""
    pass


@storage.command("upload")
@click.argument("bucket")
@click.argument(
    "path", type=click.Path(exists=True, path_type=Path, resolve_path=True)
)
def upload(bucket: str, path: Path):
    """Upload a file or directory to BUCKET.

    Directories are uploaded recursively with paths relative to the
    directory; a single file keeps just its name.

    \b
    Example:
        twigga storage upload assets ./images
        twigga storage upload assets ./logo.png
    """
    profile = ensure_profile()
    if not require_login(profile):
        return

    if path.is_dir():
        base_dir = path
        try:
            files = walk_files(path)
        except OSError as e:
            click.echo(f"Error: cannot read {e.filename or path}: {e.strerror}", err=True)
            sys.exit(1)
    else:
        base_dir = path.parent
        files = [path]

    click.echo(f"Uploading {len(files)} files to bucket {bucket} ...")
    client = PlatformClient.from_profile(profile)
    try:
        uploaded = client.upload_files(bucket, files, base_dir)
    except PlatformAPIError as e:
        fail(e)
    except OSError as e:
        click.echo(f"Error: cannot read {e.filename}: {e.strerror}", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo("Uploaded:")
    for name in uploaded:
        click.echo(f" - {name}")


@storage.command("list")
@click.argument("bucket")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_objects(bucket: str, as_json: bool):
    """List objects stored in BUCKET."""
    profile = ensure_profile()
    if not require_login(profile):
        return

    client = PlatformClient.from_profile(profile)
    try:
        objects = client.list_files(bucket)
    except PlatformAPIError as e:
        fail(e)

    if as_json:
        click.echo(json.dumps(objects, indent=2))
        return

    if not objects:
        click.echo(f"Bucket {bucket} is empty.")
        return

    for obj in objects:
        name = obj.get("name") or obj.get("key") or json.dumps(obj)
        size = obj.get("size")
        click.echo(f"{name:<50} {size if size is not None else ''}".rstrip())


@storage.command("url")
@click.argument("bucket")
@click.argument("object_name")
def object_url(bucket: str, object_name: str):
    """Print a download URL for OBJECT_NAME in BUCKET."""
    profile = ensure_profile()
    if not require_login(profile):
        return

    client = PlatformClient.from_profile(profile)
    try:
        click.echo(client.get_file_url(bucket, object_name))
    except PlatformAPIError as e:
        fail(e)


@storage.command("delete")
@click.argument("bucket")
@click.argument("object_name")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def delete_object(bucket: str, object_name: str, yes: bool):
    """Delete OBJECT_NAME from BUCKET."""
    profile = ensure_profile()
    if not require_login(profile):
        return

    if not yes:
        click.confirm(f"Delete '{object_name}' from {bucket}?", abort=True)

    client = PlatformClient.from_profile(profile)
    try:
        client.delete_file(bucket, object_name)
    except PlatformAPIError as e:
        fail(e)
    click.echo(f"Deleted {object_name}")
