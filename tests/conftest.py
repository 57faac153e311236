"""Shared fixtures for twigga CLI tests."""

import os
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from twigga.cli.platform.profile import load_profile, save_profile
from twigga.cli.platform.types import Profile


@pytest.fixture
def runner():
    """Provide a CLI runner."""
    return CliRunner()


@pytest.fixture
def profile_file(tmp_path):
    """Point the profile store at a temporary ~/.twigga/config.json."""
    path = tmp_path / ".twigga" / "config.json"
    with patch("twigga.cli.platform.profile.CONFIG_FILE", path):
        yield path


@pytest.fixture
def logged_in(profile_file):
    """Profile with a session token and an active project."""
    profile_file.parent.mkdir(parents=True, exist_ok=True)
    save_profile(
        Profile(status=True, token="session-token", project_id="MyProj"), profile_file
    )
    return profile_file


@pytest.fixture
def logged_in_no_project(profile_file):
    """Profile with a session token but no active project."""
    profile_file.parent.mkdir(parents=True, exist_ok=True)
    save_profile(Profile(status=True, token="session-token"), profile_file)
    return profile_file


@pytest.fixture
def read_profile(profile_file):
    """Reload the profile from disk."""
    return lambda: load_profile(profile_file)


@pytest.fixture
def non_utf8_site(tmp_path):
    """Site whose second file name is not valid UTF-8 (b"bad\\xff.txt")."""
    root = tmp_path / "site"
    root.mkdir()
    (root / "a.txt").write_text("hello")
    try:
        with open(os.path.join(os.fsencode(root), b"bad\xff.txt"), "wb") as f:
            f.write(b"data")
    except OSError:
        pytest.skip("file system rejects non-UTF-8 names")
    return root
