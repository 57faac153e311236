"""Static site deploy pipeline.

A deploy walks the site directory, derives the release version from the
file contents, uploads every file under that version and finally points the
``main`` channel at it. The channel is only touched once the upload has
succeeded, so a failed deploy leaves the live site on its previous release.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from .client import PlatformClient
from .config import MAIN_CHANNEL, SITE_DOMAIN
from .exceptions import DeployError, PlatformAPIError
from .release import release_version, walk_files
from .types import DeployResult

logger = logging.getLogger(__name__)


def hosting_bucket_name(project_id: str) -> str:
    """Name of the bucket that serves a project's site."""
    return f"hosting-{project_id.lower()}"


def site_url(site_id: str) -> str:
    return f"https://{site_id}.{SITE_DOMAIN}"


def plan_release(directory: Path) -> tuple[str, list[Path]]:
    """Walk ``directory`` and compute its release version.

    Returns:
        Tuple of (version, files in hash order).

    Raises:
        DeployError: If ``directory`` is not a directory or cannot be read.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise DeployError(f"invalid directory: {directory}")
    try:
        files = walk_files(directory)
        version = release_version(directory, files)
    except OSError as e:
        raise DeployError(f"compute hash: {e}") from e
    logger.info("Release version: %s (%d files)", version, len(files))
    return version, files


def publish_release(
    client: PlatformClient,
    project_id: str,
    directory: Path,
    version: str,
    files: Sequence[Path],
) -> DeployResult:
    """Upload a planned release and make it live on the ``main`` channel.

    Raises:
        DeployError: If the upload or the channel update fails.
    """
    site_id = project_id
    bucket = hosting_bucket_name(project_id)

    try:
        uploaded = client.upload_site_version(
            bucket, site_id, version, files, Path(directory)
        )
    except PlatformAPIError as e:
        raise DeployError(f"upload failed: {e.message}") from e
    except (OSError, ValueError) as e:
        raise DeployError(f"upload failed: {e}") from e

    try:
        client.point_channel(bucket, site_id, MAIN_CHANNEL, version)
    except PlatformAPIError as e:
        raise DeployError(f"failed to point main channel: {e.message}") from e

    return DeployResult(
        bucket=bucket,
        site_id=site_id,
        version=version,
        files=uploaded,
        url=site_url(site_id),
    )


def deploy_site(
    client: PlatformClient, project_id: str, directory: Path
) -> DeployResult:
    """Deploy ``directory`` as a new release of the project's site.

    Args:
        client: Authenticated service client.
        project_id: Active project; also used as the site ID.
        directory: Site root.

    Returns:
        Details of the promoted release.
    """
    version, files = plan_release(directory)
    return publish_release(client, project_id, directory, version, files)
