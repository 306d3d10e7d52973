"""Shared test fixtures for provider_scripts.

Provides a throwaway provider project on disk, run settings pointing at
it, a fake command runner that records calls instead of spawning
``npm``/``yarn``/``tsc``, and output-state management. These fixtures are
automatically discovered by pytest and available to all test modules
without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Sequence

import pytest

from provider_scripts.models import Settings
from provider_scripts.output import reset_output
from provider_scripts.runner import CommandResult


WIDGET_SCHEMA: dict[str, Any] = {
    "name": "acme",
    "resources": {
        "acme:index:Widget": {
            "properties": {"label": {"type": "string"}},
            "required": ["label"],
            "inputProperties": {"size": {"type": "integer"}},
            "requiredInputs": ["size"],
        }
    },
}


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches a Console bound to sys.stderr at creation
    time. CliRunner swaps the streams per invocation, so a stale manager
    would write to a closed file.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the real release ref, plugin host, and data dir out of tests."""
    monkeypatch.delenv("GITHUB_REF", raising=False)
    monkeypatch.delenv("PULUMI_HOME", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))


# ---------------------------------------------------------------------------
# Project fixtures
# ---------------------------------------------------------------------------


def write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A minimal provider project: package.json, schema.json, PulumiPlugin.yaml.

    No tsconfig.json and no lock file, so a build compiles nothing and
    runs a plain ``npm install``.
    """
    project = tmp_path / "acme-provider"
    project.mkdir()
    write_json(project / "package.json", {"name": "acme", "version": "1.0.0"})
    write_json(project / "schema.json", WIDGET_SCHEMA)
    (project / "PulumiPlugin.yaml").write_text("runtime: nodejs\n", encoding="utf-8")
    (project / "index.js").write_text("module.exports = {};\n", encoding="utf-8")
    return project


@pytest.fixture
def plugin_host(tmp_path: Path) -> Path:
    """An existing, empty plugin host root (stands in for ~/.pulumi)."""
    root = tmp_path / "pulumi-home"
    root.mkdir()
    return root


@pytest.fixture
def make_settings(project_dir: Path, plugin_host: Path) -> Callable[..., Settings]:
    """Factory for :class:`Settings` bound to the project and plugin host."""

    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "directory": project_dir,
            "plugin_host_root": plugin_host,
            "environment": {"PATH": "/usr/bin:/bin"},
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def settings(make_settings: Callable[..., Settings]) -> Settings:
    return make_settings()


# ---------------------------------------------------------------------------
# Fake command runner
# ---------------------------------------------------------------------------


class RecordedCall:
    def __init__(
        self,
        program: str,
        args: Sequence[str],
        cwd: Path,
        env: Optional[Mapping[str, str]],
    ) -> None:
        self.program = program
        self.args = list(args)
        self.cwd = cwd
        self.env = dict(env or {})
        # Snapshot of the working directory when the command ran.
        self.cwd_entries = sorted(p.name for p in cwd.iterdir())

    @property
    def command_line(self) -> str:
        return " ".join([self.program, *self.args])


class FakeRunner:
    """Command runner that records calls and returns canned results.

    ``results`` maps a command line prefix (``"npm ci"``, ``"npx"``) to the
    :class:`CommandResult` to return; unmatched commands succeed with empty
    output. ``on_run`` hooks can mutate the filesystem to mimic the tool.
    """

    def __init__(self) -> None:
        self.calls: list[RecordedCall] = []
        self.results: dict[str, CommandResult] = {}
        self.on_run: list[Callable[[RecordedCall], None]] = []

    def run(
        self,
        program: str,
        args: Sequence[str],
        cwd: Path,
        env: Optional[Mapping[str, str]] = None,
    ) -> CommandResult:
        call = RecordedCall(program, args, cwd, env)
        self.calls.append(call)
        for hook in self.on_run:
            hook(call)
        for prefix, result in self.results.items():
            if call.command_line.startswith(prefix):
                return result
        return CommandResult(exit_status=0, output="")

    @property
    def command_lines(self) -> list[str]:
        return [call.command_line for call in self.calls]


@pytest.fixture
def fake_runner() -> FakeRunner:
    """A :class:`FakeRunner` whose installs drop a ``node_modules`` folder."""
    runner = FakeRunner()

    def _fake_install(call: RecordedCall) -> None:
        if call.program in ("npm", "yarn") and call.args[0] in ("install", "ci"):
            module_dir = call.cwd / "node_modules" / "left-pad"
            module_dir.mkdir(parents=True)
            (module_dir / "index.js").write_text("module.exports = 1;\n")

    runner.on_run.append(_fake_install)
    return runner
