"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant is referenced by the corresponding
:class:`~provider_scripts.exceptions.ProviderScriptsError` subclass.
Every fatal build, install or configuration failure exits with
:data:`EXIT_GENERIC_FAILURE` so that package-manager scripts
(``yarn build``, ``npm run install-plugin``) see a plain non-zero status.

Example::

    $ provider-scripts build
    Error: name missing in package.json
    $ echo $?
    1
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""A configuration, build, or install step failed."""

EXIT_INTERRUPTED = 130
"""The run was cancelled with Ctrl-C."""
