"""Run settings resolution, XDG data paths, and atomic writes.

This module is the only place that reads ambient process state:

* **Settings** -- :func:`resolve_settings` combines CLI flags with the
  environment (``GITHUB_REF``, ``PULUMI_HOME``) into a frozen
  :class:`~provider_scripts.models.Settings` that is passed explicitly to
  discovery, the build pipeline and the installer.
* **Directory layout** -- :func:`get_data_dir` is XDG Base Directory
  compliant on Linux/BSD and ``~/.provider-scripts/`` elsewhere. It holds
  crash logs.
* **Atomic writes** -- :func:`atomic_write` uses a temp-file-then-rename
  strategy so a generated file is never left half written.
"""

from __future__ import annotations

import os
import platform
import tempfile
from pathlib import Path
from typing import Mapping, Optional

from provider_scripts.models import Settings

_APP_NAME = "provider-scripts"

RELEASE_REF_ENV = "GITHUB_REF"
"""Environment variable holding the release tag or ref."""

PLUGIN_HOME_ENV = "PULUMI_HOME"
"""Environment variable overriding the plugin host root."""


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/provider-scripts/`` (default
    ``~/.local/share/provider-scripts/``).
    On macOS/Windows: ``~/.provider-scripts/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Settings ---


def default_plugin_host_root(environ: Mapping[str, str]) -> Path:
    """Return the plugin host root: ``$PULUMI_HOME`` or ``~/.pulumi``."""
    override = environ.get(PLUGIN_HOME_ENV, "")
    if override:
        return Path(override).expanduser().resolve()
    return (Path.home() / ".pulumi").resolve()


def resolve_settings(
    directory: Optional[Path] = None,
    retain: bool = False,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Build the run :class:`~provider_scripts.models.Settings`.

    Args:
        directory: Provider project root. Defaults to the current
            working directory.
        retain: Keep the staging directory after a build.
        environ: Environment to read from. Defaults to ``os.environ``.
            A snapshot of it becomes the base environment for the
            compiler and package manager.

    Returns:
        The frozen settings for this run.
    """
    env = dict(os.environ if environ is None else environ)
    project_dir = (directory or Path.cwd()).resolve()
    return Settings(
        directory=project_dir,
        retain=retain,
        release_ref=env.get(RELEASE_REF_ENV),
        plugin_host_root=default_plugin_host_root(env),
        environment=env,
    )


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed and the original file is left untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
            newline="\n",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        # NamedTemporaryFile creates files as 0600.
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise
