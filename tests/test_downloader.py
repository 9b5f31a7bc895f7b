"""Tests for the single-artifact downloader.

``respx`` stands in for dist.torproject.org.  Tests that expect no network
access open a router with no matching routes (or an unused route) and assert
its call count is zero.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx
import pytest
import respx

from distfetch.config import RunConfig
from distfetch.downloader import (
    DownloadOutcome,
    download_file,
    file_extension,
    has_allowed_extension,
)
from distfetch.errors import DownloadError

_BASE = "https://dist.torproject.org/torbrowser/14.5.1/"


@pytest.fixture
def config(tmp_path: Path) -> RunConfig:
    return RunConfig(version="14.5.1", output_dir=tmp_path / "14.5.1")


@pytest.fixture
def client():
    with httpx.Client() as c:
        yield c


# ---------------------------------------------------------------------------
# Extension gate
# ---------------------------------------------------------------------------

class TestExtensionGate:
    @pytest.mark.parametrize(
        "name, ext",
        [
            ("tor-browser-linux-x86_64-14.5.1.tar.xz", ".xz"),
            ("TorBrowser-14.5.1-macos_ALL.DMG", ".dmg"),
            ("sha256sums.txt.asc-ma1", ".asc-ma1"),
            ("README", ""),
            (".hidden", ""),
        ],
    )
    def test_file_extension(self, name: str, ext: str) -> None:
        assert file_extension(name) == ext

    def test_allowlist_is_case_insensitive(self, config: RunConfig) -> None:
        assert has_allowed_extension("Installer.EXE", config.allowed_extensions)

    def test_unknown_extension_rejected(self, config: RunConfig) -> None:
        assert not has_allowed_extension("archive.rar", config.allowed_extensions)
        assert not has_allowed_extension("README", config.allowed_extensions)


# ---------------------------------------------------------------------------
# download_file
# ---------------------------------------------------------------------------

class TestDownloadFile:
    def test_disallowed_extension_skips_without_request(self, client, config, caplog) -> None:
        caplog.set_level(logging.INFO, logger="distfetch")
        with respx.mock(assert_all_called=False) as router:
            route = router.get(_BASE + "archive.rar").mock(
                return_value=httpx.Response(200, content=b"rar")
            )
            outcome = download_file(client, config, "archive.rar")

        assert outcome is DownloadOutcome.SKIPPED_EXTENSION
        assert not route.called
        assert router.calls.call_count == 0
        assert "Skipping archive.rar (disallowed extension .rar)" in caplog.text
        assert not (config.output_dir / "archive.rar").exists()

    def test_existing_file_skips_without_request(self, client, config, caplog) -> None:
        caplog.set_level(logging.INFO, logger="distfetch")
        config.output_dir.mkdir(parents=True)
        existing = config.output_dir / "image.dmg"
        existing.write_bytes(b"local copy")

        with respx.mock(assert_all_called=False) as router:
            route = router.get(_BASE + "image.dmg").mock(
                return_value=httpx.Response(200, content=b"remote copy")
            )
            outcome = download_file(client, config, "image.dmg")

        assert outcome is DownloadOutcome.SKIPPED_EXISTS
        assert not route.called
        assert router.calls.call_count == 0
        assert existing.read_bytes() == b"local copy"
        assert "already exists, skipping download" in caplog.text

    def test_downloads_body_and_creates_directory(self, client, config, caplog) -> None:
        caplog.set_level(logging.INFO, logger="distfetch")
        body = b"line one\nline two\n" + bytes(range(256)) * 512
        assert not config.output_dir.exists()

        with respx.mock:
            respx.get(_BASE + "notes.txt").mock(
                return_value=httpx.Response(200, content=body)
            )
            outcome = download_file(client, config, "notes.txt")

        assert outcome is DownloadOutcome.DOWNLOADED
        assert config.output_dir.is_dir()
        assert (config.output_dir / "notes.txt").read_bytes() == body
        assert "Downloaded notes.txt" in caplog.text

    def test_network_error_raises_download_error(self, client, config) -> None:
        with respx.mock:
            respx.get(_BASE + "notes.txt").mock(side_effect=httpx.ConnectError("down"))
            with pytest.raises(DownloadError) as excinfo:
                download_file(client, config, "notes.txt")

        assert excinfo.value.file_name == "notes.txt"
        assert isinstance(excinfo.value.cause, httpx.ConnectError)
        assert "notes.txt" in str(excinfo.value)
        assert not (config.output_dir / "notes.txt").exists()

    def test_http_error_status_raises_and_writes_nothing(self, client, config) -> None:
        with respx.mock:
            respx.get(_BASE + "gone.zip").mock(return_value=httpx.Response(404))
            with pytest.raises(DownloadError) as excinfo:
                download_file(client, config, "gone.zip")

        assert isinstance(excinfo.value.cause, httpx.HTTPStatusError)
        assert not (config.output_dir / "gone.zip").exists()

    def test_directory_creation_failure_raises(self, client, tmp_path) -> None:
        blocker = tmp_path / "14.5.1"
        blocker.write_text("not a directory")
        config = RunConfig(version="14.5.1", output_dir=blocker)

        with respx.mock:
            respx.get(_BASE + "notes.txt").mock(
                return_value=httpx.Response(200, content=b"x")
            )
            with pytest.raises(DownloadError) as excinfo:
                download_file(client, config, "notes.txt")

        assert isinstance(excinfo.value.cause, OSError)

    def test_failed_copy_removes_partial_file(self, config) -> None:
        """The body breaks off once the target file has been opened."""
        written = []

        class _BrokenBody(httpx.SyncByteStream):
            def __iter__(self):
                yield b"partial"
                written.append((config.output_dir / "big.exe").exists())
                raise httpx.ReadError("connection reset")

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, stream=_BrokenBody())

        with httpx.Client(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(DownloadError) as excinfo:
                download_file(client, config, "big.exe")

        assert written == [True]
        assert isinstance(excinfo.value.cause, httpx.ReadError)
        assert config.output_dir.is_dir()
        assert not (config.output_dir / "big.exe").exists()

    @pytest.mark.parametrize("name", ["bad\tname.txt", "a\x7f.txt"])
    def test_invalid_url_character_raises_download_error(self, client, config, name) -> None:
        with respx.mock(assert_all_called=False) as router:
            with pytest.raises(DownloadError) as excinfo:
                download_file(client, config, name)
            assert router.calls.call_count == 0

        assert excinfo.value.file_name == name
        assert isinstance(excinfo.value.cause, httpx.InvalidURL)
        assert not (config.output_dir / name).exists()

    @pytest.mark.parametrize("name", ["../escape.txt", "sub/inner.zip", "a/../b.txt"])
    def test_name_outside_output_dir_skipped(self, client, config, caplog, name) -> None:
        caplog.set_level(logging.INFO, logger="distfetch")
        with respx.mock(assert_all_called=False) as router:
            outcome = download_file(client, config, name)
            assert router.calls.call_count == 0

        assert outcome is DownloadOutcome.SKIPPED_UNSAFE_NAME
        assert f"Skipping {name} (not a plain file name)" in caplog.text
        assert not (config.output_dir.parent / "escape.txt").exists()
        assert not config.output_dir.exists()

    def test_request_targets_base_url_plus_name(self, client, config) -> None:
        with respx.mock:
            route = respx.get(_BASE + "tor-browser-14.5.1.apk").mock(
                return_value=httpx.Response(200, content=b"apk")
            )
            download_file(client, config, "tor-browser-14.5.1.apk")

        assert route.call_count == 1
        assert str(route.calls.last.request.url) == _BASE + "tor-browser-14.5.1.apk"
