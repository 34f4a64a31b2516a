"""
Release package metadata.

Reads the project name and version from package.json and derives the file
name npm pack gives the release tarball.
"""

import json
from pathlib import Path
from typing import NamedTuple, Optional

from release_artifacts.exceptions import ConfigurationError


class PackageMetadata(NamedTuple):
    """Name and version of the package being released."""

    name: str
    version: str


def read_package_metadata(path: Path) -> PackageMetadata:
    """
    Read name and version from a package.json file.

    Raises:
        ConfigurationError: If the file is missing, malformed, or lacks either field
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Package metadata not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Package metadata is not valid JSON: {path}") from e

    name = data.get("name") if isinstance(data, dict) else None
    version = data.get("version") if isinstance(data, dict) else None
    if not name or not version:
        raise ConfigurationError(f"Package metadata in {path} needs name and version")

    return PackageMetadata(name=name, version=version)


def tarball_name(package_name: str, version: str) -> str:
    """File name npm pack produces, e.g. @splunk/otel 1.0.0 -> splunk-otel-1.0.0.tgz."""
    base = package_name.lstrip("@").replace("/", "-")
    return f"{base}-{version}.tgz"


def resolve_release_tarball(
    package_json_path: Path,
    release_name: Optional[str] = None,
    release_version: Optional[str] = None,
) -> str:
    """
    Name of the primary release tarball.

    Explicit release_name and release_version take precedence; package.json is
    only read when one of them is missing.
    """
    if release_name and release_version:
        return tarball_name(release_name, release_version)

    metadata = read_package_metadata(package_json_path)
    return tarball_name(release_name or metadata.name, release_version or metadata.version)
