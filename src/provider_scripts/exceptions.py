"""Exception hierarchy for provider_scripts.

All exceptions inherit from :class:`ProviderScriptsError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`provider_scripts.exit_codes`. The top-level error handler in
:func:`provider_scripts.app.main` catches ``ProviderScriptsError`` and exits
with the appropriate code, while unexpected exceptions produce a crash log
and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    ProviderScriptsError (exit 1)
    +-- ConfigError
    |   +-- MissingNameError
    +-- SchemaError
    |   +-- SchemaReadError
    |   +-- SchemaParseError
    +-- InvalidVersionTagError
    +-- CommandError
    +-- UnsupportedConventionError
    +-- PluginHostNotFoundError
"""

from __future__ import annotations

from typing import Optional

from provider_scripts.exit_codes import EXIT_GENERIC_FAILURE


class ProviderScriptsError(Exception):
    """Base exception for all provider_scripts errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(ProviderScriptsError):
    """Raised for project configuration problems (unreadable ``package.json``, missing manifest)."""


class MissingNameError(ConfigError):
    """Raised when ``package.json`` has no string ``name`` field."""


class SchemaError(ProviderScriptsError):
    """Base class for resource schema failures."""


class SchemaReadError(SchemaError):
    """Raised when the schema file is missing or cannot be read."""


class SchemaParseError(SchemaError):
    """Raised when the schema is not valid JSON/YAML or has the wrong shape."""


class InvalidVersionTagError(ProviderScriptsError):
    """Raised when the release tag is not of the form ``v<major>.<minor>.<patch>``."""


class CommandError(ProviderScriptsError):
    """Raised when an external tool (compiler, package manager) fails.

    The tool's own combined output is kept on :attr:`output` and appended
    to the message verbatim so that it reaches the user unchanged.

    Args:
        message: Summary of which command failed.
        output: Combined stdout/stderr captured from the tool.
    """

    def __init__(self, message: str, output: Optional[str] = None):
        self.output = output or ""
        if self.output.strip():
            message = f"{message}\n{self.output.rstrip()}"
        super().__init__(message)


class UnsupportedConventionError(ProviderScriptsError):
    """Raised for a lock convention with no install strategy."""


class PluginHostNotFoundError(ProviderScriptsError):
    """Raised when the plugin host's root directory does not exist."""
