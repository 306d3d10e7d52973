"""Build pipeline -- stage, install and archive a provider.

Typical usage::

    from provider_scripts.build import build

    artifact = build(settings)
    print(artifact.archive_path)   # <project>/dist/<name>.tar.gz

Sub-modules:

* :mod:`~provider_scripts.build.pipeline` -- :class:`BuildOrchestrator`
  and its stages.
* :mod:`~provider_scripts.build.version` -- release tag to version.
"""

from provider_scripts.build.pipeline import (
    INSTALL_STRATEGIES,
    BuildOrchestrator,
    BuildStage,
    InstallStrategy,
    build,
    select_install_strategy,
)
from provider_scripts.build.version import resolve_release_version

__all__ = [
    "INSTALL_STRATEGIES",
    "BuildOrchestrator",
    "BuildStage",
    "InstallStrategy",
    "build",
    "resolve_release_version",
    "select_install_strategy",
]
