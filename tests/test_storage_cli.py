"""Tests for the bucket, buckets and storage commands."""

import json
from unittest.mock import MagicMock, patch

import pytest

from twigga.cli.cli import cli
from twigga.cli.platform.exceptions import PlatformAPIError
from twigga.cli.platform.types import BucketRecord


@pytest.fixture
def bucket_client():
    client = MagicMock()
    with patch("twigga.cli.commands.buckets.PlatformClient") as mock_cls:
        mock_cls.from_profile.return_value = client
        yield client


@pytest.fixture
def storage_client():
    client = MagicMock()
    with patch("twigga.cli.commands.storage.PlatformClient") as mock_cls:
        mock_cls.from_profile.return_value = client
        yield client


class TestCreateBucket:
    """Tests for `twigga bucket create`."""

    def test_creates_record_and_bucket(self, runner, logged_in, bucket_client):
        bucket_client.list_buckets.return_value = []

        result = runner.invoke(cli, ["bucket", "create", "assets"])

        assert result.exit_code == 0, result.output
        assert "Message: bucket created" in result.output
        bucket_client.list_buckets.assert_called_once_with("MyProj", folder="assets")
        db, collection, doc = bucket_client.create_document.call_args[0]
        assert (db, collection) == ("Twigga", "Buckets")
        assert doc["folder"] == "assets"
        assert doc["projectId"] == "MyProj"
        assert len(doc["folderId"]) == 20
        assert doc["createdAt"]
        bucket_client.create_bucket.assert_called_once_with("assets")

    def test_existing_folder(self, runner, logged_in, bucket_client):
        bucket_client.list_buckets.return_value = [
            BucketRecord(folder="assets", folder_id="f1", project_id="MyProj")
        ]

        result = runner.invoke(cli, ["bucket", "create", "assets"])

        assert result.exit_code == 0
        assert "Message: folder assets exists already!" in result.output
        bucket_client.create_document.assert_not_called()
        bucket_client.create_bucket.assert_not_called()

    def test_requires_project(self, runner, logged_in_no_project, bucket_client):
        result = runner.invoke(cli, ["bucket", "create", "assets"])

        assert result.exit_code == 0
        assert "No active project" in result.output
        bucket_client.list_buckets.assert_not_called()

    def test_requires_login(self, runner, profile_file, bucket_client):
        result = runner.invoke(cli, ["bucket", "create", "assets"])

        assert "You need to be authenticated" in result.output
        bucket_client.list_buckets.assert_not_called()

    def test_storage_error(self, runner, logged_in, bucket_client):
        bucket_client.list_buckets.return_value = []
        bucket_client.create_bucket.side_effect = PlatformAPIError(400, "invalid bucket name")

        result = runner.invoke(cli, ["bucket", "create", "Bad Name"])

        assert result.exit_code == 1
        assert "invalid bucket name" in result.output
        assert "bucket created" not in result.output


class TestListBuckets:
    """Tests for `twigga buckets`."""

    def test_table(self, runner, logged_in, bucket_client):
        bucket_client.list_buckets.return_value = [
            BucketRecord(folder="assets", folder_id="f1"),
            BucketRecord(folder="media", folder_id="f2"),
        ]

        result = runner.invoke(cli, ["buckets"])

        assert result.exit_code == 0
        bucket_client.list_buckets.assert_called_once_with("MyProj")
        assert "FOLDER NAME" in result.output
        assert "assets" in result.output
        assert "media" in result.output

    def test_empty(self, runner, logged_in, bucket_client):
        bucket_client.list_buckets.return_value = []

        result = runner.invoke(cli, ["buckets"])

        assert "No buckets found" in result.output

    def test_json(self, runner, logged_in, bucket_client):
        bucket_client.list_buckets.return_value = [
            BucketRecord(folder="assets", folder_id="f1", project_id="MyProj")
        ]

        result = runner.invoke(cli, ["buckets", "--json"])

        data = json.loads(result.output)
        assert data[0]["folder"] == "assets"
        assert data[0]["folderId"] == "f1"


class TestStorageUpload:
    """Tests for `twigga storage upload`."""

    def test_upload_directory(self, runner, logged_in, storage_client, tmp_path):
        site = tmp_path / "images"
        (site / "icons").mkdir(parents=True)
        (site / "logo.png").write_bytes(b"png")
        (site / "icons" / "a.svg").write_text("<svg/>")
        storage_client.upload_files.return_value = ["icons/a.svg", "logo.png"]

        result = runner.invoke(cli, ["storage", "upload", "assets", str(site)])

        assert result.exit_code == 0, result.output
        bucket, files, base_dir = storage_client.upload_files.call_args[0]
        assert bucket == "assets"
        assert [f.relative_to(site.resolve()).as_posix() for f in files] == [
            "icons/a.svg",
            "logo.png",
        ]
        assert base_dir == site.resolve()
        assert "Uploading 2 files to bucket assets ..." in result.output
        assert " - icons/a.svg" in result.output

    def test_upload_single_file(self, runner, logged_in, storage_client, tmp_path):
        path = tmp_path / "logo.png"
        path.write_bytes(b"png")
        storage_client.upload_files.return_value = ["logo.png"]

        result = runner.invoke(cli, ["storage", "upload", "assets", str(path)])

        assert result.exit_code == 0
        _, files, base_dir = storage_client.upload_files.call_args[0]
        assert files == [path.resolve()]
        assert base_dir == tmp_path.resolve()

    def test_missing_path(self, runner, logged_in, storage_client, tmp_path):
        result = runner.invoke(cli, ["storage", "upload", "assets", str(tmp_path / "nope")])

        assert result.exit_code == 2
        storage_client.upload_files.assert_not_called()

    def test_upload_error(self, runner, logged_in, storage_client, tmp_path):
        (tmp_path / "a.txt").write_text("a")
        storage_client.upload_files.side_effect = PlatformAPIError(404, "no such bucket")

        result = runner.invoke(cli, ["storage", "upload", "missing", str(tmp_path / "a.txt")])

        assert result.exit_code == 1
        assert "no such bucket" in result.output

    def test_requires_login(self, runner, profile_file, storage_client, tmp_path):
        result = runner.invoke(cli, ["storage", "upload", "assets", str(tmp_path)])

        assert "You need to be authenticated" in result.output
        storage_client.upload_files.assert_not_called()


class TestStorageObjects:
    """Tests for `twigga storage list|url|delete`."""

    def test_list(self, runner, logged_in, storage_client):
        storage_client.list_files.return_value = [{"name": "logo.png", "size": 3}]

        result = runner.invoke(cli, ["storage", "list", "assets"])

        assert result.exit_code == 0
        assert "logo.png" in result.output

    def test_list_empty(self, runner, logged_in, storage_client):
        storage_client.list_files.return_value = []

        result = runner.invoke(cli, ["storage", "list", "assets"])

        assert "Bucket assets is empty." in result.output

    def test_url(self, runner, logged_in, storage_client):
        storage_client.get_file_url.return_value = "https://cdn.example/logo.png"

        result = runner.invoke(cli, ["storage", "url", "assets", "logo.png"])

        assert result.output.strip() == "https://cdn.example/logo.png"
        storage_client.get_file_url.assert_called_once_with("assets", "logo.png")

    def test_delete_with_confirmation(self, runner, logged_in, storage_client):
        result = runner.invoke(cli, ["storage", "delete", "assets", "logo.png"], input="y\n")

        assert result.exit_code == 0
        storage_client.delete_file.assert_called_once_with("assets", "logo.png")
        assert "Deleted logo.png" in result.output

    def test_delete_declined(self, runner, logged_in, storage_client):
        result = runner.invoke(cli, ["storage", "delete", "assets", "logo.png"], input="n\n")

        assert result.exit_code == 1
        storage_client.delete_file.assert_not_called()

    def test_delete_yes(self, runner, logged_in, storage_client):
        result = runner.invoke(cli, ["storage", "delete", "assets", "logo.png", "--yes"])

        assert result.exit_code == 0
        storage_client.delete_file.assert_called_once()
