"""Provider type generation -- schema in, ``provider-types.d.ts`` out.

Typical usage::

    from provider_scripts.generator import generate_provider_types

    path = generate_provider_types(Path("."))

Sub-modules:

* :mod:`~provider_scripts.generator.declarations` -- builds the
  declaration IR from a :class:`~provider_scripts.models.SchemaDocument`.
* :mod:`~provider_scripts.generator.printer` -- renders the IR to text.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from provider_scripts.config import atomic_write
from provider_scripts.generator.declarations import HEADER_WARNING, build_declarations
from provider_scripts.generator.printer import DeclarationPrinter, TypeScriptPrinter
from provider_scripts.output import debug
from provider_scripts.schema import find_schema, load_schema

__all__ = [
    "HEADER_WARNING",
    "DeclarationPrinter",
    "TypeScriptPrinter",
    "build_declarations",
    "generate_provider_types",
]


def generate_provider_types(
    directory: Path,
    printer: Optional[DeclarationPrinter] = None,
) -> Path:
    """Regenerate the declaration file for the project in *directory*.

    Loads the project's schema, builds declarations and writes them to
    ``printer.filename`` in *directory*, replacing any previous content.

    Args:
        directory: Provider project root.
        printer: Output printer. Defaults to :class:`TypeScriptPrinter`.

    Returns:
        Path of the written declaration file.

    Raises:
        SchemaReadError: If the schema file is missing or unreadable.
        SchemaParseError: If the schema cannot be parsed.
    """
    printer = printer or TypeScriptPrinter()
    schema_path = find_schema(directory)
    debug(f"Loading schema from: {schema_path}")
    schema = load_schema(schema_path)
    declaration_file = build_declarations(schema)
    target = directory / printer.filename
    atomic_write(target, printer.print_file(declaration_file))
    debug(f"Wrote {len(declaration_file.declarations)} declarations to {target}")
    return target
