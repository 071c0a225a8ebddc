"""Tests for the swish CLI."""
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from swishpy.cli.main import app
from swishpy.core.download.models import RemoteManifest
from swishpy.core.exceptions import PasswordRequiredError
from swishpy.core.upload.models import Container, LocalFile, UploadResult


LINK = "https://www.swisstransfer.com/d/3215702a-bed4-4cec-9eb6-d731048a2312"


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def fake_client():
    """Patch SwishClient with an async context manager mock."""
    client = MagicMock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    client.upload_files = AsyncMock()
    client.resolve = AsyncMock()
    client.download_manifest = AsyncMock()
    with patch("swishpy.SwishClient", return_value=client):
        yield client


class TestUploadCommand:
    """Tests for 'swish upload'."""

    def test_upload_prints_link(self, runner: CliRunner, fake_client, make_file) -> None:
        """Upload should print the share link."""
        path = make_file("a.txt", b"abc")
        local_file = LocalFile.from_path(path)
        fake_client.collect_files.return_value = [local_file]
        fake_client.upload_files.return_value = UploadResult(LINK, Container('h', 'c', ('f',)), (local_file,))

        result = runner.invoke(app, ["upload", str(path), "--duration", "7", "--downloads", "10", "-m", "hi"])

        assert result.exit_code == 0, result.output
        assert LINK in result.output
        files, params = fake_client.upload_files.await_args.args
        assert files == [local_file]
        assert params.duration == 7
        assert params.number_of_downloads == 10
        assert params.message == "hi"

    def test_upload_invalid_duration(self, runner: CliRunner, make_file) -> None:
        """Upload should reject durations outside 1, 7, 15, 30."""
        path = make_file("a.txt", b"abc")

        result = runner.invoke(app, ["upload", str(path), "--duration", "3"])

        assert result.exit_code == 2

    def test_upload_invalid_downloads(self, runner: CliRunner, make_file) -> None:
        """Upload should reject more than 250 downloads."""
        path = make_file("a.txt", b"abc")

        result = runner.invoke(app, ["upload", str(path), "--downloads", "251"])

        assert result.exit_code == 2

    def test_upload_missing_path(self, runner: CliRunner, tmp_path: Path) -> None:
        """Upload should reject a missing path."""
        result = runner.invoke(app, ["upload", str(tmp_path / "missing")])

        assert result.exit_code == 2


class TestDownloadCommand:
    """Tests for 'swish download'."""

    def test_download(self, runner: CliRunner, fake_client, link_payload, tmp_path: Path) -> None:
        """Download should resolve then fetch every file."""
        manifest = RemoteManifest.from_response(link_payload)
        fake_client.resolve.return_value = manifest
        fake_client.download_manifest.return_value = [tmp_path / "hello.txt"]

        result = runner.invoke(app, ["download", LINK, "-o", str(tmp_path), "-p", "pw"])

        assert result.exit_code == 0, result.output
        fake_client.resolve.assert_awaited_once_with(LINK, "pw")
        fake_client.download_manifest.assert_awaited_once()
        assert "Downloaded" in result.output

    def test_download_invalid_link(self, runner: CliRunner) -> None:
        """Download should reject anything but a share link."""
        result = runner.invoke(app, ["download", "https://example.com/d/abc"])

        assert result.exit_code == 2

    def test_download_error_exits_1(self, runner: CliRunner, fake_client) -> None:
        """Service errors should print a message and exit with 1."""
        fake_client.resolve.side_effect = PasswordRequiredError()

        result = runner.invoke(app, ["download", LINK])

        assert result.exit_code == 1
        assert "password" in result.output.lower()


class TestInfoCommand:
    """Tests for 'swish info'."""

    def test_info_lists_files(self, runner: CliRunner, fake_client, link_payload) -> None:
        """Info should show the files of the link."""
        fake_client.resolve.return_value = RemoteManifest.from_response(link_payload)

        result = runner.invoke(app, ["info", LINK])

        assert result.exit_code == 0, result.output
        assert "hello.txt" in result.output
        assert "1 file(s)" in result.output
