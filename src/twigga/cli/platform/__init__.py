"""Twigga service client, profile store and deploy pipeline."""

from .client import PlatformClient, extract_auth_url
from .config import CONFIG_FILE, DEFAULT_ACCOUNT_URL, DEFAULT_BASE_URL
from .exceptions import (
    DeployError,
    LoginError,
    LoginTimeoutError,
    MalformedResponseError,
    NoTokenError,
    PlatformAPIError,
    ProfileError,
    RateLimitError,
    TwiggaError,
)
from .hosting import deploy_site, hosting_bucket_name, site_url
from .ids import generate_document_id
from .profile import (
    clear_session,
    ensure_profile,
    load_profile,
    save_profile,
    save_token,
)
from .release import compute_release_hash, release_version, walk_files
from .types import BucketRecord, DeployResult, Profile, ProjectRecord, UserRecord

__all__ = [
    # Client
    "PlatformClient",
    "extract_auth_url",
    # Config
    "CONFIG_FILE",
    "DEFAULT_BASE_URL",
    "DEFAULT_ACCOUNT_URL",
    # Errors
    "TwiggaError",
    "PlatformAPIError",
    "RateLimitError",
    "MalformedResponseError",
    "ProfileError",
    "LoginError",
    "LoginTimeoutError",
    "NoTokenError",
    "DeployError",
    # Hosting
    "deploy_site",
    "hosting_bucket_name",
    "site_url",
    # IDs and releases
    "generate_document_id",
    "compute_release_hash",
    "release_version",
    "walk_files",
    # Profile
    "ensure_profile",
    "load_profile",
    "save_profile",
    "save_token",
    "clear_session",
    # Types
    "Profile",
    "UserRecord",
    "ProjectRecord",
    "BucketRecord",
    "DeployResult",
]
