"""Tests for twigga.cli.platform.profile and the Profile model."""

import json

import pytest

from twigga.cli.platform.config import DEFAULT_ACCOUNT_URL, DEFAULT_BASE_URL
from twigga.cli.platform.exceptions import ProfileError
from twigga.cli.platform.profile import (
    clear_session,
    ensure_profile,
    load_profile,
    save_profile,
    save_token,
)
from twigga.cli.platform.types import Profile


class TestProfileModel:
    """Tests for the Profile model."""

    def test_defaults(self):
        profile = Profile()
        assert profile.status is False
        assert profile.base_url == DEFAULT_BASE_URL
        assert profile.account_base_url == DEFAULT_ACCOUNT_URL
        assert profile.project_id == ""
        assert profile.token == ""

    def test_json_uses_file_keys(self):
        data = json.loads(Profile(project_id="p1", token="t").to_json())
        assert set(data) == {"status", "baseURL", "accountBaseURL", "projectId", "token"}
        assert data["projectId"] == "p1"

    def test_is_logged_in_requires_token(self):
        assert Profile(status=True, token="abc").is_logged_in
        assert not Profile(status=True, token="").is_logged_in
        assert not Profile(status=False, token="abc").is_logged_in

    def test_zero_profile_is_empty(self):
        profile = Profile.zero()
        assert profile.base_url == ""
        assert profile.account_base_url == ""
        assert not profile.is_logged_in


class TestProfileStore:
    """Tests for profile persistence."""

    def test_ensure_creates_default(self, profile_file):
        profile = ensure_profile()

        assert profile_file.exists()
        assert profile.status is False
        assert profile.token == ""
        assert profile.project_id == ""
        assert profile.base_url == DEFAULT_BASE_URL

    def test_ensure_sets_permissions(self, profile_file):
        ensure_profile()
        assert profile_file.stat().st_mode & 0o777 == 0o600
        assert profile_file.parent.stat().st_mode & 0o777 == 0o755

    def test_ensure_loads_existing(self, profile_file):
        profile_file.parent.mkdir(parents=True)
        save_profile(Profile(project_id="existing"), profile_file)

        assert ensure_profile().project_id == "existing"

    def test_load_missing_file_is_error(self, tmp_path):
        with pytest.raises(ProfileError) as exc:
            load_profile(tmp_path / "nope.json")
        assert "nope.json" in str(exc.value)

    def test_load_malformed_json_yields_zero_profile(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")

        profile = load_profile(path)
        assert profile == Profile.zero()

    def test_load_wrong_shape_yields_zero_profile(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"status": {"nested": true}}')

        assert load_profile(path) == Profile.zero()

    def test_load_reads_go_style_keys(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(
                {
                    "status": True,
                    "baseURL": "https://base.example",
                    "accountBaseURL": "https://account.example",
                    "projectId": "proj",
                    "token": "tok",
                }
            )
        )

        profile = load_profile(path)
        assert profile.is_logged_in
        assert profile.base_url == "https://base.example"
        assert profile.project_id == "proj"

    def test_save_uses_two_space_indent(self, tmp_path):
        path = tmp_path / "config.json"
        save_profile(Profile(), path)
        assert '\n  "status": false' in path.read_text()

    def test_save_leaves_no_temp_files(self, tmp_path):
        path = tmp_path / "config.json"
        save_profile(Profile(), path)
        save_profile(Profile(token="x", status=True), path)
        assert [p.name for p in tmp_path.iterdir()] == ["config.json"]

    def test_save_into_missing_directory_is_error(self, tmp_path):
        with pytest.raises(ProfileError):
            save_profile(Profile(), tmp_path / "missing" / "config.json")

    def test_save_token(self, profile_file):
        profile = ensure_profile()
        save_token(profile, "XYZ")

        loaded = load_profile(profile_file)
        assert loaded.status is True
        assert loaded.token == "XYZ"

    def test_save_token_rejects_empty(self, profile_file):
        profile = ensure_profile()
        with pytest.raises(ValueError):
            save_token(profile, "")

    def test_clear_session(self, profile_file):
        profile = ensure_profile()
        profile.project_id = "proj"
        save_token(profile, "XYZ")

        clear_session(profile)

        loaded = load_profile(profile_file)
        assert loaded.status is False
        assert loaded.token == ""
        assert loaded.project_id == ""
        assert loaded.base_url == DEFAULT_BASE_URL
