"""Discover provider project metadata from its directory.

:func:`discover` reads ``package.json`` and looks for the files that
decide how the build proceeds:

* ``tsconfig.json`` -- sources must be compiled before packaging.
* ``package-lock.json`` -- install with ``npm ci``.
* ``yarn.lock`` -- install with ``yarn install``.

npm's lock file wins when both are present.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from provider_scripts.exceptions import ConfigError, MissingNameError
from provider_scripts.models import LockConvention, ProjectMetadata

PACKAGE_FILENAME = "package.json"
COMPILER_CONFIG_FILENAME = "tsconfig.json"
DEFAULT_VERSION = "0.0.0"

LOCK_FILENAMES: dict[LockConvention, str] = {
    LockConvention.CONSOLIDATED: "package-lock.json",
    LockConvention.DISTRIBUTED: "yarn.lock",
}


def detect_lock_convention(directory: Path) -> LockConvention:
    """Return the lock convention used in *directory*."""
    for convention in (LockConvention.CONSOLIDATED, LockConvention.DISTRIBUTED):
        if (directory / LOCK_FILENAMES[convention]).is_file():
            return convention
    return LockConvention.NONE


def load_package(directory: Path) -> dict[str, Any]:
    """Read and parse ``package.json`` from *directory*.

    Raises:
        ConfigError: If the file is missing, unreadable, or not a JSON object.
    """
    path = directory / PACKAGE_FILENAME
    if not path.is_file():
        raise ConfigError(f"{PACKAGE_FILENAME} not found in {directory}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Invalid {PACKAGE_FILENAME} at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {PACKAGE_FILENAME} at {path}: expected an object")
    return data


def discover(directory: Path) -> ProjectMetadata:
    """Collect :class:`~provider_scripts.models.ProjectMetadata` for *directory*.

    ``version`` quietly falls back to ``"0.0.0"`` when it is missing or not
    a string.

    Raises:
        ConfigError: If ``package.json`` cannot be loaded.
        MissingNameError: If ``package.json`` has no string ``name``.
    """
    package = load_package(directory)
    name = package.get("name")
    if not isinstance(name, str):
        raise MissingNameError(f"name missing in {PACKAGE_FILENAME}")
    version = package.get("version")
    return ProjectMetadata(
        name=name,
        version=version if isinstance(version, str) else DEFAULT_VERSION,
        has_compiled_source=(directory / COMPILER_CONFIG_FILENAME).is_file(),
        lock_convention=detect_lock_convention(directory),
    )
