"""The build pipeline -- from project directory to ``dist/<name>.tar.gz``.

:class:`BuildOrchestrator` runs these stages strictly in order:

1. ``GENERATE_TYPES`` -- regenerate ``provider-types.d.ts`` from the schema.
2. ``DISCOVER`` -- read ``package.json`` and detect tsconfig/lock files.
3. ``PREPARE_WORKSPACE`` -- create a fresh temporary staging directory.
4. ``COMPILE`` -- only with a ``tsconfig.json``: run ``tsc`` with emit
   forced on and output directed into staging.
5. ``RESOLVE_VERSION`` -- write ``package.json`` into staging, with the
   version taken from the release tag when one is set.
6. ``STAGE_FILES`` -- copy ``PulumiPlugin.yaml`` and the lock file.
7. ``INSTALL_DEPENDENCIES`` -- ``yarn install``, ``npm ci`` or
   ``npm install`` inside staging with ``NODE_ENV=production``.
8. ``ARCHIVE`` -- gzip every staging entry into ``dist/<name>.tar.gz``.
9. ``CLEANUP`` -- always runs; removes staging unless ``--retain``. A
   directory that cannot be removed is reported as a warning.

A failing stage raises; the staging directory is still cleaned up before
the error reaches the caller. Completed stages are recorded on
:attr:`BuildOrchestrator.completed`.
"""

from __future__ import annotations

import enum
import json
import shutil
import tarfile
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from provider_scripts.build.version import resolve_release_version
from provider_scripts.discovery import (
    LOCK_FILENAMES,
    PACKAGE_FILENAME,
    discover,
    load_package,
)
from provider_scripts.exceptions import (
    CommandError,
    ConfigError,
    UnsupportedConventionError,
)
from provider_scripts.generator import generate_provider_types
from provider_scripts.models import (
    BuildArtifact,
    LockConvention,
    ProjectMetadata,
    Settings,
)
from provider_scripts.output import debug, info, success, tool_output, warning
from provider_scripts.runner import CommandRunner, SubprocessRunner

MANIFEST_FILENAME = "PulumiPlugin.yaml"
DIST_DIRNAME = "dist"
STAGING_PREFIX = "provider-build-"
PRODUCTION_ENV = {"NODE_ENV": "production"}


class BuildStage(str, enum.Enum):
    """Pipeline stages in execution order."""

    GENERATE_TYPES = "generate-types"
    DISCOVER = "discover"
    PREPARE_WORKSPACE = "prepare-workspace"
    COMPILE = "compile"
    RESOLVE_VERSION = "resolve-version"
    STAGE_FILES = "stage-files"
    INSTALL_DEPENDENCIES = "install-dependencies"
    ARCHIVE = "archive"
    CLEANUP = "cleanup"


@dataclass(frozen=True)
class InstallStrategy:
    """How to install dependencies for one lock convention."""

    program: str
    args: tuple[str, ...]
    lock_filename: Optional[str] = None

    @property
    def command_line(self) -> str:
        return " ".join((self.program, *self.args))


INSTALL_STRATEGIES: dict[LockConvention, InstallStrategy] = {
    LockConvention.DISTRIBUTED: InstallStrategy(
        "yarn", ("install",), LOCK_FILENAMES[LockConvention.DISTRIBUTED]
    ),
    LockConvention.CONSOLIDATED: InstallStrategy(
        "npm", ("ci",), LOCK_FILENAMES[LockConvention.CONSOLIDATED]
    ),
    LockConvention.NONE: InstallStrategy("npm", ("install",)),
}


def select_install_strategy(convention: LockConvention) -> InstallStrategy:
    """Return the install strategy for *convention*.

    Raises:
        UnsupportedConventionError: If no strategy is registered.
    """
    try:
        return INSTALL_STRATEGIES[convention]
    except KeyError:
        raise UnsupportedConventionError(
            f"Package manager not implemented for lock convention: {convention!r}"
        ) from None


def compile_command(project: ProjectMetadata, out_dir: Path) -> tuple[str, list[str]]:
    """Return ``(program, args)`` for compiling TypeScript into *out_dir*.

    Yarn projects run ``yarn tsc``; everything else goes through ``npx``.
    ``--noEmit false`` overrides a local tsconfig that disables emit.
    """
    program = "yarn" if project.lock_convention is LockConvention.DISTRIBUTED else "npx"
    return program, ["tsc", "--noEmit", "false", "--outDir", str(out_dir)]


def create_archive(source_dir: Path, archive_path: Path) -> Path:
    """Write every entry of *source_dir* into a gzip tarball.

    Members are added in sorted order at the archive root. Parent
    directories of *archive_path* are created as needed.
    """
    archive_path.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(archive_path, "w:gz") as tar:
        for entry in sorted(source_dir.iterdir(), key=lambda p: p.name):
            tar.add(entry, arcname=entry.name)
    return archive_path


class BuildOrchestrator:
    """Run the build pipeline for one provider project.

    Args:
        settings: Run settings; ``settings.directory`` is the project root.
        runner: Command runner for ``tsc`` and the package manager.
            Defaults to a :class:`~provider_scripts.runner.SubprocessRunner`
            seeded with ``settings.environment``.

    Example::

        artifact = BuildOrchestrator(resolve_settings()).run()
        print(artifact.archive_path)
    """

    def __init__(self, settings: Settings, runner: Optional[CommandRunner] = None) -> None:
        self.settings = settings
        self.runner: CommandRunner = runner or SubprocessRunner(settings.environment)
        self.completed: list[BuildStage] = []

    @property
    def directory(self) -> Path:
        return self.settings.directory

    def run(self) -> BuildArtifact:
        """Execute every stage and return the built artifact.

        Raises:
            ProviderScriptsError: From whichever stage failed. The staging
                directory has already been cleaned up when it propagates.
        """
        with self._stage(BuildStage.GENERATE_TYPES):
            generate_provider_types(self.directory)

        with self._stage(BuildStage.DISCOVER):
            project = discover(self.directory)
            debug(
                f"Discovered {project.name}@{project.version} "
                f"(typescript={project.has_compiled_source}, "
                f"lock={project.lock_convention.value})"
            )

        with self._workspace() as staging:
            if project.has_compiled_source:
                with self._stage(BuildStage.COMPILE):
                    self._compile(project, staging)

            with self._stage(BuildStage.RESOLVE_VERSION):
                version = self._write_package(project, staging)

            with self._stage(BuildStage.STAGE_FILES):
                self._stage_files(project, staging)

            with self._stage(BuildStage.INSTALL_DEPENDENCIES):
                self._install_dependencies(project, staging)

            with self._stage(BuildStage.ARCHIVE):
                archive_path = create_archive(
                    staging, self.directory / DIST_DIRNAME / f"{project.name}.tar.gz"
                )
                success(f"Packaged to {_display_path(archive_path, self.directory)}")

        return BuildArtifact(
            staging_directory=staging,
            archive_path=archive_path,
            name=project.name,
            version=version,
        )

    # ------------------------------------------------------------------
    # Stage bookkeeping
    # ------------------------------------------------------------------

    @contextmanager
    def _stage(self, stage: BuildStage) -> Iterator[None]:
        debug(f"Stage: {stage.value}")
        yield
        self.completed.append(stage)

    @contextmanager
    def _workspace(self) -> Iterator[Path]:
        staging = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX))
        self.completed.append(BuildStage.PREPARE_WORKSPACE)
        debug(f"Staging directory: {staging}")
        try:
            yield staging
        finally:
            if self.settings.retain:
                info(f"Retained build directory {staging}")
            else:
                try:
                    shutil.rmtree(staging)
                except OSError as exc:
                    # Must not replace a stage failure that is propagating.
                    warning(f"Could not remove build directory {staging}: {exc}")
            self.completed.append(BuildStage.CLEANUP)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _compile(self, project: ProjectMetadata, staging: Path) -> None:
        program, args = compile_command(project, staging)
        info(f"Compiling with {program} tsc...")
        result = self.runner.run(program, args, cwd=self.directory)
        if not result.ok:
            raise CommandError(
                f"Compilation failed ({program} tsc exited with status {result.exit_status})",
                result.output,
            )
        tool_output(result.output)

    def _write_package(self, project: ProjectMetadata, staging: Path) -> str:
        """Put ``package.json`` into staging and return the packaged version."""
        target = staging / PACKAGE_FILENAME
        ref = self.settings.release_ref
        if ref is None:
            shutil.copyfile(self.directory / PACKAGE_FILENAME, target)
            return project.version

        version = resolve_release_version(ref)
        package = load_package(self.directory)
        package["version"] = version
        target.write_text(
            json.dumps(package, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )
        info(f"Using version {version} from release tag")
        return version

    def _stage_files(self, project: ProjectMetadata, staging: Path) -> None:
        manifest = self.directory / MANIFEST_FILENAME
        if not manifest.is_file():
            raise ConfigError(f"{MANIFEST_FILENAME} not found in {self.directory}")
        shutil.copyfile(manifest, staging / MANIFEST_FILENAME)

        lock_filename = select_install_strategy(project.lock_convention).lock_filename
        if lock_filename is not None:
            shutil.copyfile(self.directory / lock_filename, staging / lock_filename)

    def _install_dependencies(self, project: ProjectMetadata, staging: Path) -> None:
        strategy = select_install_strategy(project.lock_convention)
        info(f"Installing production dependencies with {strategy.command_line}...")
        result = self.runner.run(
            strategy.program, list(strategy.args), cwd=staging, env=PRODUCTION_ENV
        )
        if not result.ok:
            raise CommandError(
                f"{strategy.command_line} exited with status {result.exit_status}",
                result.output,
            )
        tool_output(result.output)


def build(settings: Settings, runner: Optional[CommandRunner] = None) -> BuildArtifact:
    """Run the full build pipeline; see :class:`BuildOrchestrator`."""
    return BuildOrchestrator(settings, runner).run()


def _display_path(path: Path, base: Path) -> str:
    try:
        return str(path.relative_to(base))
    except ValueError:
        return str(path)
