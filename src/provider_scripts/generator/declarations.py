"""Build typed declarations from a resource schema.

Every resource token ``package:module:Type`` produces two declarations,
``TypeInputs`` and ``TypeOutputs``, in schema order. This module only
builds the intermediate representation
(:class:`~provider_scripts.models.DeclarationFile`); turning it into
source text is the job of a
:class:`~provider_scripts.generator.printer.DeclarationPrinter`.

**Mapping rules:**

* ``string`` becomes text; ``integer`` and ``number`` become numeric;
  ``boolean`` stays boolean.
* ``array`` becomes an array of unknown and ``object`` a string-keyed map
  of unknown. Element and nested schemas are not modelled, so they are
  erased rather than resolved recursively.
* Anything else, including a missing tag, becomes unknown.
* A field is optional unless its name is in the group's required list.
"""

from __future__ import annotations

from typing import Optional

from provider_scripts.exceptions import SchemaParseError
from provider_scripts.models import (
    DeclarationField,
    DeclarationFile,
    DeclaredType,
    SchemaDocument,
    SchemaType,
    TypeDeclaration,
    TypeReference,
)

HEADER_WARNING = """\
This file was automatically generated by provider-scripts.
DO NOT MODIFY IT BY HAND. Instead, modify the source schema file,
and run "provider-scripts generate" to regenerate this file."""

_TYPE_MAP: dict[SchemaType, DeclaredType] = {
    SchemaType.STRING: DeclaredType.TEXT,
    SchemaType.INTEGER: DeclaredType.NUMERIC,
    SchemaType.NUMBER: DeclaredType.NUMERIC,
    SchemaType.BOOLEAN: DeclaredType.BOOLEAN,
    SchemaType.ARRAY: DeclaredType.UNKNOWN_ARRAY,
    SchemaType.OBJECT: DeclaredType.UNKNOWN_MAP,
}


def declared_type(reference: TypeReference) -> DeclaredType:
    """Map a schema property type to its declared type category."""
    return _TYPE_MAP.get(reference.kind, DeclaredType.UNKNOWN)


def type_name_from_token(token: str) -> str:
    """Return the ``Type`` segment of a ``package:module:Type`` token.

    Raises:
        SchemaParseError: If the token has no third segment.
    """
    parts = token.split(":")
    if len(parts) < 3 or not parts[2]:
        raise SchemaParseError(
            f"Invalid resource token '{token}': expected 'package:module:Type'"
        )
    return parts[2]


def build_fields(
    properties: Optional[dict[str, TypeReference]],
    required: Optional[list[str]],
) -> tuple[DeclarationField, ...]:
    """Convert one property group into ordered declaration fields."""
    if not properties:
        return ()
    required_names = set(required or ())
    return tuple(
        DeclarationField(
            property_name=name,
            type=declared_type(reference),
            optional=name not in required_names,
        )
        for name, reference in properties.items()
    )


def build_declarations(
    schema: SchemaDocument, header: str = HEADER_WARNING
) -> DeclarationFile:
    """Translate every resource in *schema* into input/output declarations.

    The result depends only on the schema content, so regenerating from an
    unchanged schema renders byte-identical output.

    Args:
        schema: The parsed schema document.
        header: Text of the generated-file warning.

    Returns:
        The declarations, two per resource, in schema order.

    Raises:
        SchemaParseError: If a resource token is malformed.
    """
    declarations: list[TypeDeclaration] = []
    for token, resource in schema.resources.items():
        type_name = type_name_from_token(token)
        declarations.append(
            TypeDeclaration(
                name=f"{type_name}Inputs",
                fields=build_fields(resource.input_properties, resource.required_inputs),
            )
        )
        declarations.append(
            TypeDeclaration(
                name=f"{type_name}Outputs",
                fields=build_fields(resource.properties, resource.required),
            )
        )
    return DeclarationFile(header=header, declarations=tuple(declarations))
