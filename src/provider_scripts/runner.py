"""Command execution for external tools (``tsc``, ``npm``, ``yarn``).

The build pipeline never calls :mod:`subprocess` directly. It talks to a
:class:`CommandRunner`, which takes a program, its arguments, a working
directory and environment overrides, and returns a :class:`CommandResult`
with the exit status and the combined stdout/stderr. Tests substitute a
fake runner that records calls instead of spawning processes.

:class:`SubprocessRunner` is the real implementation. It runs one command
at a time and blocks until it exits.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Protocol, Sequence

from provider_scripts.exceptions import CommandError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command."""

    exit_status: int
    output: str

    @property
    def ok(self) -> bool:
        return self.exit_status == 0


class CommandRunner(Protocol):
    """Anything that can run an external command to completion."""

    def run(
        self,
        program: str,
        args: Sequence[str],
        cwd: Path,
        env: Optional[Mapping[str, str]] = None,
    ) -> CommandResult:
        """Run *program* with *args* in *cwd*; *env* overrides the base environment."""
        ...


class SubprocessRunner:
    """Run commands with :func:`subprocess.run`.

    Args:
        base_env: Environment every command starts from, normally
            :attr:`Settings.environment <provider_scripts.models.Settings.environment>`.
        timeout: Optional per-command timeout in seconds.
    """

    def __init__(
        self,
        base_env: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._base_env = dict(base_env or {})
        self._timeout = timeout

    def run(
        self,
        program: str,
        args: Sequence[str],
        cwd: Path,
        env: Optional[Mapping[str, str]] = None,
    ) -> CommandResult:
        merged_env = dict(self._base_env)
        if env:
            merged_env.update(env)

        # Resolve through PATH ourselves so npm.cmd / yarn.cmd work on Windows.
        executable = shutil.which(program, path=merged_env.get("PATH"))
        if executable is None:
            raise CommandError(f"Command not found: {program}")

        command = [executable, *args]
        logger.debug("Running %s in %s", " ".join(command), cwd)
        try:
            completed = subprocess.run(
                command,
                cwd=str(cwd),
                env=merged_env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as exc:
            output = exc.output if isinstance(exc.output, str) else ""
            raise CommandError(
                f"{program} timed out after {self._timeout} seconds", output
            ) from exc
        except OSError as exc:
            raise CommandError(f"Failed to run {program}: {exc}") from exc

        logger.debug("%s exited with status %d", program, completed.returncode)
        return CommandResult(exit_status=completed.returncode, output=completed.stdout or "")
