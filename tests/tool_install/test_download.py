"""
Tool Install — HTTP fetch and artifact download tests.
"""

from __future__ import annotations

import http.client
import io
import urllib.error
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from oneclick.core.services.tool_install.domain.errors import (
    DownloadFailed,
    NetworkFailure,
)
from oneclick.core.services.tool_install.execution.download import (
    download_file,
    fetch_text,
)

_URLOPEN = "oneclick.core.services.tool_install.execution.download.urllib.request.urlopen"


def _response(body: bytes, length: bool = True) -> MagicMock:
    stream = io.BytesIO(body)
    resp = MagicMock()
    resp.read.side_effect = stream.read
    resp.headers = {"Content-Length": str(len(body))} if length else {}
    cm = MagicMock()
    cm.__enter__.return_value = resp
    return cm


def _http_error(code: int) -> urllib.error.HTTPError:
    return urllib.error.HTTPError("https://x", code, "error", {}, None)


class TestFetchText:
    @patch(_URLOPEN)
    def test_returns_body(self, mock_urlopen: MagicMock):
        mock_urlopen.return_value = _response(b"go1.21.5\n")
        assert fetch_text("https://golang.org/VERSION?m=text", timeout=5) == "go1.21.5\n"
        assert mock_urlopen.call_args[1]["timeout"] == 5

    @patch(_URLOPEN)
    def test_http_error(self, mock_urlopen: MagicMock):
        mock_urlopen.side_effect = _http_error(503)
        with pytest.raises(NetworkFailure, match="503"):
            fetch_text("https://x")

    @patch(_URLOPEN)
    def test_transport_error(self, mock_urlopen: MagicMock):
        mock_urlopen.side_effect = urllib.error.URLError("timed out")
        with pytest.raises(NetworkFailure):
            fetch_text("https://x")


class TestDownloadFile:
    @patch(_URLOPEN)
    def test_writes_body(self, mock_urlopen: MagicMock, tmp_path: Path):
        body = b"x" * 20000
        mock_urlopen.return_value = _response(body)
        dest = tmp_path / "sub" / "go.tar.gz"
        assert download_file("https://x/go.tar.gz", dest, connect_timeout=7) == len(body)
        assert dest.read_bytes() == body
        assert mock_urlopen.call_args[1]["timeout"] == 7

    @patch(_URLOPEN)
    def test_404_removes_partial_file(self, mock_urlopen: MagicMock, tmp_path: Path):
        mock_urlopen.side_effect = _http_error(404)
        dest = tmp_path / "go.tar.gz"
        with pytest.raises(DownloadFailed, match="404") as exc_info:
            download_file("https://x/go.tar.gz", dest)
        assert exc_info.value.exit_code == 4
        assert not dest.exists()

    @patch(_URLOPEN)
    def test_empty_body_rejected(self, mock_urlopen: MagicMock, tmp_path: Path):
        mock_urlopen.return_value = _response(b"", length=False)
        dest = tmp_path / "go.tar.gz"
        with pytest.raises(DownloadFailed, match="empty"):
            download_file("https://x/go.tar.gz", dest)
        assert not dest.exists()

    @patch(_URLOPEN)
    def test_deadline_exceeded(self, mock_urlopen: MagicMock, tmp_path: Path):
        mock_urlopen.return_value = _response(b"x" * 100)
        dest = tmp_path / "go.tar.gz"
        with pytest.raises(DownloadFailed, match="exceeded"):
            download_file("https://x/go.tar.gz", dest, total_timeout=-1)
        assert not dest.exists()

    @patch(_URLOPEN)
    def test_short_body_rejected(self, mock_urlopen: MagicMock, tmp_path: Path):
        cm = _response(b"x" * 100)
        cm.__enter__.return_value.headers = {"Content-Length": "1000"}
        mock_urlopen.return_value = cm
        dest = tmp_path / "go.tar.gz"
        with pytest.raises(DownloadFailed, match="truncated"):
            download_file("https://x/go.tar.gz", dest)
        assert not dest.exists()

    @patch(_URLOPEN)
    def test_incomplete_chunked_read(self, mock_urlopen: MagicMock, tmp_path: Path):
        cm = _response(b"")
        cm.__enter__.return_value.read.side_effect = http.client.IncompleteRead(b"abc", 100)
        mock_urlopen.return_value = cm
        dest = tmp_path / "go.tar.gz"
        with pytest.raises(DownloadFailed, match="failed") as exc_info:
            download_file("https://x/go.tar.gz", dest)
        assert exc_info.value.exit_code == 4
        assert not dest.exists()
