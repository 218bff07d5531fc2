"""Download of the CLI binaries the plugin shells out to.

Each tool maps a platform key (``<os>/<arch>``) to a pinned release URL.
A URL of the form ``<archive>//<subdir>`` points into a tarball: the
binary is taken from ``<subdir>`` inside it.
"""

import io
import os
import platform
import stat
import tarfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import requests

from ghexecutor.errors import DependencyError
from ghexecutor.utils.logging import get_logger

logger = get_logger(__name__)

DOWNLOAD_TIMEOUT_SECONDS = 120

_MACHINE_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
}


@dataclass(frozen=True)
class Dependency:
    """Download locations of one CLI tool, keyed by platform."""

    urls: Dict[str, str] = field(default_factory=dict)


DEPENDENCIES: Dict[str, Dependency] = {
    "gh": Dependency(urls={
        "darwin/amd64": "https://github.com/cli/cli/releases/download/v2.21.2/gh_2.21.2_macOS_amd64.tar.gz//gh_2.21.2_macOS_amd64/bin",
        "linux/amd64": "https://github.com/cli/cli/releases/download/v2.21.2/gh_2.21.2_linux_amd64.tar.gz//gh_2.21.2_linux_amd64/bin",
        "linux/arm64": "https://github.com/cli/cli/releases/download/v2.21.2/gh_2.21.2_linux_arm64.tar.gz//gh_2.21.2_linux_arm64/bin",
        "linux/386": "https://github.com/cli/cli/releases/download/v2.21.2/gh_2.21.2_linux_386.tar.gz//gh_2.21.2_linux_386/bin",
    }),
    "kubectl": Dependency(urls={
        "darwin/amd64": "https://dl.k8s.io/release/v1.26.0/bin/darwin/amd64/kubectl",
        "linux/amd64": "https://dl.k8s.io/release/v1.26.0/bin/linux/amd64/kubectl",
        "linux/arm64": "https://dl.k8s.io/release/v1.26.0/bin/linux/arm64/kubectl",
        "linux/386": "https://dl.k8s.io/release/v1.26.0/bin/linux/386/kubectl",
    }),
}


def current_platform() -> str:
    """Return the platform key of this machine, e.g. "linux/amd64"."""
    system = platform.system().lower()
    machine = platform.machine().lower()
    return f"{system}/{_MACHINE_ALIASES.get(machine, machine)}"


def split_archive_url(url: str) -> Tuple[str, Optional[str]]:
    """Split ``<archive>//<subdir>`` into the archive URL and the subdirectory.

    Returns:
        Tuple of (download URL, subdirectory or None for a plain binary)
    """
    scheme, sep, rest = url.partition("://")
    if not sep:
        scheme, rest = "", url
    location, _, subdir = rest.partition("//")
    download_url = f"{scheme}://{location}" if scheme else location
    return download_url, (subdir.strip("/") or None)


def _fetch(url: str) -> bytes:
    try:
        response = requests.get(url, timeout=DOWNLOAD_TIMEOUT_SECONDS)
        response.raise_for_status()
    except requests.exceptions.Timeout as e:
        raise DependencyError(f"Download of {url} timed out") from e
    except requests.exceptions.RequestException as e:
        raise DependencyError(f"Failed to download {url}: {e}") from e
    return response.content


def _extract_binary(archive: bytes, subdir: str, name: str) -> bytes:
    member_name = f"{subdir}/{name}"
    try:
        with tarfile.open(fileobj=io.BytesIO(archive), mode="r:gz") as tar:
            member = tar.extractfile(member_name)
            if member is None:
                raise DependencyError(f"{member_name} in archive is not a regular file")
            return member.read()
    except KeyError as e:
        raise DependencyError(f"{member_name} not found in archive") from e
    except tarfile.TarError as e:
        raise DependencyError(f"Invalid archive for {name}: {e}") from e


def _install(path: Path, content: bytes) -> None:
    path.write_bytes(content)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def download_dependencies(
    dependencies: Dict[str, Dependency],
    bin_dir: str,
    platform_key: Optional[str] = None,
) -> List[str]:
    """Download every dependency that is not already in ``bin_dir``.

    Args:
        dependencies: Tool name to download table
        bin_dir: Directory the binaries are installed into
        platform_key: Platform to download for; defaults to this machine

    Returns:
        Names of the tools that were downloaded

    Raises:
        DependencyError: If a tool has no build for the platform or the
            download fails
    """
    platform_key = platform_key or current_platform()
    target_dir = Path(bin_dir)
    target_dir.mkdir(parents=True, exist_ok=True)

    downloaded = []
    for name, dependency in dependencies.items():
        target = target_dir / name
        if target.exists():
            logger.debug("dependency_present", name=name, path=str(target))
            continue

        url = dependency.urls.get(platform_key)
        if url is None:
            raise DependencyError(f"No {name} build available for platform {platform_key}")

        download_url, subdir = split_archive_url(url)
        content = _fetch(download_url)
        if subdir:
            content = _extract_binary(content, subdir, name)

        _install(target, content)
        logger.info("dependency_downloaded", name=name, url=download_url, path=str(target))
        downloaded.append(name)

    return downloaded


def ensure_on_path(bin_dir: str) -> None:
    """Prepend ``bin_dir`` to PATH so the downloaded tools resolve by name."""
    paths = os.environ.get("PATH", "").split(os.pathsep)
    if bin_dir not in paths:
        os.environ["PATH"] = os.pathsep.join([bin_dir] + [p for p in paths if p])
