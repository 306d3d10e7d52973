"""provider_scripts -- Build, package and install NodeJS resource providers.

This package turns a provider project (``package.json``, ``schema.json``,
``PulumiPlugin.yaml`` and optional TypeScript sources) into a
self-contained ``.tar.gz`` plugin archive, and can install that archive
into the local plugin host's registry.

Typical workflow::

    provider-scripts generate   # regenerate provider-types.d.ts
    provider-scripts build      # package the provider to ./dist
    provider-scripts install    # build, then install under ~/.pulumi/plugins

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the package.
    config: Explicit run settings and filesystem helpers.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"
