"""Install a built provider into the local plugin host.

The plugin host (``~/.pulumi`` or ``$PULUMI_HOME``) discovers providers
under ``plugins/provider-<name>-v<version>/``. Installing removes any
existing directory for that exact name and version, recreates it, and
extracts the archive into it.

The host root itself must already exist; this tool never creates it.
The remove/recreate/extract sequence is not atomic, so an interrupted
install can leave the entry missing or half extracted. Re-run the
install to repair it.
"""

from __future__ import annotations

import shutil
import tarfile
from pathlib import Path
from typing import Optional

from provider_scripts.build import build
from provider_scripts.exceptions import PluginHostNotFoundError
from provider_scripts.models import BuildArtifact, Settings
from provider_scripts.output import debug, success
from provider_scripts.runner import CommandRunner

PLUGINS_DIRNAME = "plugins"


def plugin_directory_name(name: str, version: str) -> str:
    """Return the registry directory name for a provider release."""
    return f"provider-{name}-v{version}"


class PluginInstaller:
    """Extract build artifacts into the plugin host registry.

    Args:
        settings: Run settings; only ``plugin_host_root`` is used.
    """

    def __init__(self, settings: Settings) -> None:
        self.host_root = settings.plugin_host_root

    def target_directory(self, artifact: BuildArtifact) -> Path:
        return self.host_root / PLUGINS_DIRNAME / plugin_directory_name(
            artifact.name, artifact.version
        )

    def install(self, artifact: BuildArtifact) -> Path:
        """Install *artifact* and return the plugin directory.

        Raises:
            PluginHostNotFoundError: If the host root does not exist.
        """
        if not self.host_root.is_dir():
            raise PluginHostNotFoundError(f"{self.host_root} doesn't exist")

        plugin_dir = self.target_directory(artifact)
        if plugin_dir.exists():
            debug(f"Removing previous install at {plugin_dir}")
            shutil.rmtree(plugin_dir)
        plugin_dir.mkdir(parents=True)

        with tarfile.open(artifact.archive_path, "r:gz") as tar:
            tar.extractall(plugin_dir, filter="data")

        success(f"Installed to {plugin_dir}")
        return plugin_dir


def install(settings: Settings, runner: Optional[CommandRunner] = None) -> Path:
    """Build the provider, then install it into the plugin host.

    Returns:
        The plugin directory the provider was extracted into.
    """
    artifact = build(settings, runner)
    return PluginInstaller(settings).install(artifact)
