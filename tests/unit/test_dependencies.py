"""Unit tests for CLI dependency download."""

import io
import os
import tarfile
from unittest.mock import MagicMock, patch

import pytest
import requests

from ghexecutor.dependencies import (
    DEPENDENCIES,
    Dependency,
    current_platform,
    download_dependencies,
    ensure_on_path,
    split_archive_url,
)
from ghexecutor.errors import DependencyError


def _tarball(members):
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, content in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            tar.addfile(info, io.BytesIO(content))
    return buf.getvalue()


def _response(content=b"", status_error=None):
    response = MagicMock()
    response.content = content
    if status_error:
        response.raise_for_status.side_effect = status_error
    return response


class TestDependencyTable:
    """Tests for the pinned dependency table."""

    @pytest.mark.parametrize("platform_key", ["darwin/amd64", "linux/amd64", "linux/arm64", "linux/386"])
    def test_all_platforms_covered(self, platform_key):
        for dependency in DEPENDENCIES.values():
            assert platform_key in dependency.urls

    def test_pinned_versions(self):
        assert "v2.21.2" in DEPENDENCIES["gh"].urls["linux/amd64"]
        assert "v1.26.0" in DEPENDENCIES["kubectl"].urls["linux/amd64"]


class TestPlatform:
    """Tests for platform detection."""

    @pytest.mark.parametrize("system,machine,expected", [
        ("Linux", "x86_64", "linux/amd64"),
        ("Linux", "aarch64", "linux/arm64"),
        ("Linux", "i686", "linux/386"),
        ("Darwin", "x86_64", "darwin/amd64"),
        ("Darwin", "arm64", "darwin/arm64"),
    ])
    def test_current_platform(self, system, machine, expected):
        with patch("platform.system", return_value=system), patch("platform.machine", return_value=machine):
            assert current_platform() == expected


class TestSplitArchiveUrl:
    """Tests for split_archive_url."""

    def test_archive_with_subdir(self):
        url, subdir = split_archive_url("https://example.com/gh.tar.gz//gh_2.21.2_linux_amd64/bin")

        assert url == "https://example.com/gh.tar.gz"
        assert subdir == "gh_2.21.2_linux_amd64/bin"

    def test_plain_binary(self):
        url, subdir = split_archive_url("https://dl.k8s.io/release/v1.26.0/bin/linux/amd64/kubectl")

        assert url == "https://dl.k8s.io/release/v1.26.0/bin/linux/amd64/kubectl"
        assert subdir is None


class TestDownloadDependencies:
    """Tests for download_dependencies."""

    @patch("ghexecutor.dependencies.requests.get")
    def test_plain_binary(self, mock_get, tmp_path):
        mock_get.return_value = _response(b"#!/bin/sh\necho kubectl\n")
        deps = {"kubectl": Dependency(urls={"linux/amd64": "https://example.com/kubectl"})}

        downloaded = download_dependencies(deps, str(tmp_path), platform_key="linux/amd64")

        assert downloaded == ["kubectl"]
        binary = tmp_path / "kubectl"
        assert binary.read_bytes() == b"#!/bin/sh\necho kubectl\n"
        assert os.access(binary, os.X_OK)
        mock_get.assert_called_once()
        assert mock_get.call_args.args[0] == "https://example.com/kubectl"

    @patch("ghexecutor.dependencies.requests.get")
    def test_binary_from_archive(self, mock_get, tmp_path):
        mock_get.return_value = _response(_tarball({
            "gh_1/bin/gh": b"gh-binary",
            "gh_1/LICENSE": b"license",
        }))
        deps = {"gh": Dependency(urls={"linux/amd64": "https://example.com/gh.tar.gz//gh_1/bin"})}

        download_dependencies(deps, str(tmp_path), platform_key="linux/amd64")

        assert (tmp_path / "gh").read_bytes() == b"gh-binary"
        assert mock_get.call_args.args[0] == "https://example.com/gh.tar.gz"

    @patch("ghexecutor.dependencies.requests.get")
    def test_existing_binary_is_skipped(self, mock_get, tmp_path):
        (tmp_path / "kubectl").write_bytes(b"old")
        deps = {"kubectl": Dependency(urls={"linux/amd64": "https://example.com/kubectl"})}

        downloaded = download_dependencies(deps, str(tmp_path), platform_key="linux/amd64")

        assert downloaded == []
        mock_get.assert_not_called()

    def test_unsupported_platform(self, tmp_path):
        deps = {"kubectl": Dependency(urls={"linux/amd64": "https://example.com/kubectl"})}

        with pytest.raises(DependencyError, match="windows/amd64"):
            download_dependencies(deps, str(tmp_path), platform_key="windows/amd64")

    @patch("ghexecutor.dependencies.requests.get")
    def test_http_error(self, mock_get, tmp_path):
        mock_get.return_value = _response(status_error=requests.exceptions.HTTPError("404"))
        deps = {"kubectl": Dependency(urls={"linux/amd64": "https://example.com/kubectl"})}

        with pytest.raises(DependencyError, match="Failed to download"):
            download_dependencies(deps, str(tmp_path), platform_key="linux/amd64")

        assert not (tmp_path / "kubectl").exists()

    @patch("ghexecutor.dependencies.requests.get")
    def test_missing_member_in_archive(self, mock_get, tmp_path):
        mock_get.return_value = _response(_tarball({"other/gh": b"x"}))
        deps = {"gh": Dependency(urls={"linux/amd64": "https://example.com/gh.tar.gz//gh_1/bin"})}

        with pytest.raises(DependencyError, match="not found"):
            download_dependencies(deps, str(tmp_path), platform_key="linux/amd64")


class TestEnsureOnPath:
    """Tests for ensure_on_path."""

    def test_prepends_once(self, monkeypatch):
        monkeypatch.setenv("PATH", "/usr/bin")

        ensure_on_path("/opt/tools")
        ensure_on_path("/opt/tools")

        assert os.environ["PATH"] == os.pathsep.join(["/opt/tools", "/usr/bin"])
