"""CLI command for deploying static sites."""

import json
import sys
import time
from pathlib import Path
from typing import NoReturn

import click

from ..platform.client import PlatformClient
from ..platform.exceptions import DeployError
from ..platform.hosting import (
    deploy_site,
    hosting_bucket_name,
    plan_release,
    publish_release,
)
from ..platform.profile import ensure_profile
from ..platform.release import relative_name
from ..utils import Spinner, format_elapsed, format_size
from . import require_project


def _total_size(files: list[Path]) -> int:
    return sum(f.stat().st_size for f in files)


@click.command("deploy")
@click.argument("directory", type=click.Path(path_type=Path))
@click.option(
    "--dry-run", is_flag=True, help="Compute the release version without uploading"
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def deploy(directory: Path, dry_run: bool, as_json: bool):
    """Deploy a static site DIRECTORY to the active project.

    Every file is uploaded under a release version derived from the
    directory contents, then the main channel is pointed at it.

    \b
    Example:
        twigga deploy ./dist
        twigga deploy ./public --dry-run
    """
    profile = ensure_profile()
    if not require_project(profile):
        return

    project_id = profile.project_id

    if dry_run:
        try:
            version, files = plan_release(directory)
        except DeployError as e:
            _exit_with(e, as_json)
        names = [relative_name(f, directory) for f in files]
        if as_json:
            click.echo(json.dumps({"version": version, "files": names}, indent=2))
        else:
            click.echo(f"Release version: {version}")
            for name in names:
                click.echo(f" - {click.format_filename(name)}")
        return

    if as_json:
        try:
            result = deploy_site(PlatformClient.from_profile(profile), project_id, directory)
        except DeployError as e:
            _exit_with(e, as_json)
        click.echo(json.dumps(result.model_dump(), indent=2))
        return

    click.echo()
    deploy_start = time.time()

    status = Spinner(indent=2)
    bucket = hosting_bucket_name(project_id)
    try:
        # ── Hash ──
        with status.step("Computing release version...") as step:
            version, files = plan_release(directory)
            step.suffix = f"({version})"

        # ── Upload & promote ──
        size = format_size(_total_size(files))
        with status.step(f"Deploying {len(files)} files ({size}) to {bucket}..."):
            client = PlatformClient.from_profile(profile)
            result = publish_release(client, project_id, directory, version, files)
    except DeployError as e:
        _exit_with(e, as_json)

    for name in result.files:
        click.echo(f"   - {name}")

    total_time = format_elapsed(time.time() - deploy_start)
    click.echo()
    click.echo(f"  Deployed {result.version} in {total_time}")
    click.echo(f"  Site deployed and pointed: {result.url}")
    click.echo()


def _exit_with(e: DeployError, as_json: bool) -> NoReturn:
    if as_json:
        click.echo(json.dumps({"error": e.message}), err=True)
    else:
        click.echo(f"Error: {e.message}", err=True)
    sys.exit(1)
