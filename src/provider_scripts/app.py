"""Typer application and CLI entry point for provider_scripts.

Commands:

* ``generate`` -- regenerate ``provider-types.d.ts`` from the schema.
* ``build`` -- run the full build pipeline and print the archive path.
* ``install`` -- build, then install into the local plugin host.

The root callback turns the global flags and the environment into a
:class:`~provider_scripts.models.Settings` once and stores it on
``ctx.obj``; commands pass it on explicitly.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Any failure, including an unknown or missing command,
exits with status 1.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator, Optional

import click
import typer

from provider_scripts import __version__
from provider_scripts.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INTERRUPTED,
    EXIT_SUCCESS,
)
from provider_scripts.models import Settings


app = typer.Typer(
    name="provider-scripts",
    help="Build helpers for NodeJS Pulumi providers.",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"provider-scripts {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    directory: Optional[Path] = typer.Option(
        None,
        "--directory",
        "-C",
        file_okay=False,
        help="Provider project directory. [default: current directory]",
    ),
    retain: bool = typer.Option(
        False, "--retain", help="Skip deleting the temporary build directory."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~provider_scripts.output.OutputManager`
    and resolves the run settings into ``ctx.obj``. Invoked without a
    command it prints usage to stderr and exits 1.
    """
    from provider_scripts.config import resolve_settings
    from provider_scripts.output import OutputManager, set_output

    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help(), err=True)
        raise typer.Exit(code=EXIT_GENERIC_FAILURE)

    ctx.obj = resolve_settings(directory=directory, retain=retain)


@contextmanager
def _fatal_errors() -> Iterator[None]:
    """Report a :class:`ProviderScriptsError` on stderr and exit with its code."""
    from provider_scripts.exceptions import ProviderScriptsError
    from provider_scripts.output import error

    try:
        yield
    except ProviderScriptsError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc


@app.command("generate")
def generate_command(ctx: typer.Context) -> None:
    """Generate provider types from the schema."""
    from provider_scripts.generator import generate_provider_types
    from provider_scripts.output import success

    settings = ctx.obj
    with _fatal_errors():
        path = generate_provider_types(settings.directory)
    success(f"Generated {path.name}")


_RETAIN_OPTION = typer.Option(
    False, "--retain", help="Skip deleting the temporary build directory."
)


def _build_settings(ctx: typer.Context, retain: bool) -> Settings:
    """Settings from the root callback, with a command-level ``--retain`` applied."""
    settings: Settings = ctx.obj
    if retain and not settings.retain:
        settings = settings.model_copy(update={"retain": True})
    return settings


@app.command("build")
def build_command(ctx: typer.Context, retain: bool = _RETAIN_OPTION) -> None:
    """Build the provider package to ./dist."""
    from provider_scripts.build import build
    from provider_scripts.output import print_data

    with _fatal_errors():
        artifact = build(_build_settings(ctx, retain))
    print_data(str(artifact.archive_path))


@app.command("install")
def install_command(ctx: typer.Context, retain: bool = _RETAIN_OPTION) -> None:
    """Build the provider and install it locally."""
    from provider_scripts.install import install
    from provider_scripts.output import suggest

    with _fatal_errors():
        plugin_dir = install(_build_settings(ctx, retain))
    suggest(f"Run `pulumi plugin ls` to confirm {plugin_dir.name} is available.")


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from provider_scripts.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``provider-scripts`` console script.

    Runs the Typer app in non-standalone mode so that every outcome maps to
    a single exit status:

    * usage errors (unknown command or option) print usage and exit 1;
    * :class:`~provider_scripts.exceptions.ProviderScriptsError` exits with
      the error's ``exit_code``;
    * anything else writes a crash log and exits 1.

    Raises:
        SystemExit: Always.
    """
    _setup_signal_handlers()
    try:
        result = app(standalone_mode=False)
    except click.exceptions.UsageError as exc:
        exc.show()
        sys.exit(EXIT_GENERIC_FAILURE)
    except (click.exceptions.Abort, KeyboardInterrupt):
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from provider_scripts.exceptions import ProviderScriptsError
        from provider_scripts.output import error

        if isinstance(exc, ProviderScriptsError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
    sys.exit(result if isinstance(result, int) else EXIT_SUCCESS)
