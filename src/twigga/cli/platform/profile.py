"""Profile persistence for the Twigga CLI.

The profile holds the service origins, the session token and the active
project. It is written whole-file through a temporary file and ``os.replace``
so a crash never leaves a half-written credential file behind.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from .config import CONFIG_FILE
from .exceptions import ProfileError
from .types import Profile

logger = logging.getLogger(__name__)


def _resolve(path: Path | None) -> Path:
    return Path(path) if path is not None else CONFIG_FILE


def ensure_profile(path: Path | None = None) -> Profile:
    """Load the profile, creating a default one on first use.

    Args:
        path: Profile location (defaults to ~/.twigga/config.json).

    Returns:
        The loaded or newly created profile.
    """
    path = _resolve(path)
    if not path.exists():
        try:
            if not path.parent.is_dir():
                path.parent.mkdir(parents=True)
                path.parent.chmod(0o755)
        except OSError as e:
            raise ProfileError(path.parent, f"cannot create config directory ({e})") from e
        profile = Profile()
        save_profile(profile, path)
        logger.debug("Created default profile at %s", path)
        return profile
    return load_profile(path)


def load_profile(path: Path | None = None) -> Profile:
    """Read the profile from disk.

    A missing file is an error. Malformed content yields a zero-valued
    profile since older CLI versions may have written a different shape.
    """
    path = _resolve(path)
    try:
        raw = path.read_text()
    except OSError as e:
        raise ProfileError(path, f"cannot read profile ({e.strerror or e})") from e
    try:
        return Profile.model_validate_json(raw)
    except (ValidationError, ValueError):
        logger.warning("Ignoring malformed profile at %s", path)
        return Profile.zero()


def save_profile(profile: Profile, path: Path | None = None) -> None:
    """Write the profile atomically with owner-only permissions.

    Args:
        profile: Profile to persist.
        path: Profile location.
    """
    path = _resolve(path)
    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
    except OSError as e:
        raise ProfileError(path, f"cannot write profile ({e.strerror or e})") from e

    try:
        with os.fdopen(fd, "w") as f:
            f.write(profile.to_json())
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, 0o600)
        os.replace(tmp_name, path)
    except OSError as e:
        Path(tmp_name).unlink(missing_ok=True)
        raise ProfileError(path, f"cannot write profile ({e.strerror or e})") from e


def save_token(profile: Profile, token: str, path: Path | None = None) -> None:
    """Store a session token and mark the profile as logged in."""
    if not token:
        raise ValueError("token must not be empty")
    profile.token = token
    profile.status = True
    save_profile(profile, path)


def clear_session(profile: Profile, path: Path | None = None) -> None:
    """Forget the session token and the active project."""
    profile.token = ""
    profile.status = False
    profile.project_id = ""
    save_profile(profile, path)
