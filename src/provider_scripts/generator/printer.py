"""Render a :class:`~provider_scripts.models.DeclarationFile` as source text.

:class:`DeclarationPrinter` is the extension point: a printer for another
target language only has to implement the three ``render_*`` hooks.
:class:`TypeScriptPrinter` produces a ``.d.ts`` file::

    /**
     * This file was automatically generated by provider-scripts.
     * ...
     */
    export interface WidgetInputs {
        readonly size: number;
        readonly label?: string;
    }
"""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod

from provider_scripts.models import (
    DeclarationField,
    DeclarationFile,
    DeclaredType,
    TypeDeclaration,
)


class DeclarationPrinter(ABC):
    """Base class for declaration file printers.

    Subclasses set :attr:`filename` and implement the ``render_*`` hooks.
    :meth:`print_file` joins the header and every declaration with LF
    newlines and always ends the file with a single newline.
    """

    filename: str = ""

    def print_file(self, declaration_file: DeclarationFile) -> str:
        """Render the whole file."""
        blocks = [self.render_header(declaration_file.header)]
        blocks.extend(self.render_declaration(d) for d in declaration_file.declarations)
        return "\n".join(blocks) + "\n"

    @abstractmethod
    def render_header(self, header: str) -> str:
        """Render the generated-file warning."""

    @abstractmethod
    def render_declaration(self, declaration: TypeDeclaration) -> str:
        """Render one declaration."""

    @abstractmethod
    def render_type(self, declared: DeclaredType) -> str:
        """Render a declared type category."""


_IDENTIFIER_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")

_TS_TYPES: dict[DeclaredType, str] = {
    DeclaredType.TEXT: "string",
    DeclaredType.NUMERIC: "number",
    DeclaredType.BOOLEAN: "boolean",
    DeclaredType.UNKNOWN_ARRAY: "unknown[]",
    DeclaredType.UNKNOWN_MAP: "Record<string, unknown>",
    DeclaredType.UNKNOWN: "unknown",
}


class TypeScriptPrinter(DeclarationPrinter):
    """Print declarations as exported TypeScript interfaces."""

    filename = "provider-types.d.ts"
    indent = "    "

    def render_header(self, header: str) -> str:
        lines = ["/**"]
        lines.extend(f" * {line}".rstrip() for line in header.splitlines())
        lines.append(" */")
        return "\n".join(lines)

    def render_declaration(self, declaration: TypeDeclaration) -> str:
        lines = [f"export interface {declaration.name} {{"]
        lines.extend(self.indent + self.render_field(f) for f in declaration.fields)
        lines.append("}")
        return "\n".join(lines)

    def render_field(self, field: DeclarationField) -> str:
        marker = "?" if field.optional else ""
        return (
            f"readonly {self.render_property_name(field.property_name)}{marker}: "
            f"{self.render_type(field.type)};"
        )

    def render_property_name(self, name: str) -> str:
        """Quote names that are not plain identifiers (``"content-type"``)."""
        if _IDENTIFIER_RE.fullmatch(name):
            return name
        return json.dumps(name, ensure_ascii=False)

    def render_type(self, declared: DeclaredType) -> str:
        return _TS_TYPES[declared]
