"""Load the provider's resource schema from disk.

Schemas are usually ``schema.json`` but YAML (``schema.yaml`` /
``schema.yml``) is accepted too. The format is picked from the file
extension and otherwise detected from the content.

The two public functions are:

* :func:`find_schema` -- Locate the schema file in a project directory.
* :func:`load_schema` -- Read, parse and validate it into a
  :class:`~provider_scripts.models.SchemaDocument`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from provider_scripts.exceptions import SchemaParseError, SchemaReadError
from provider_scripts.models import SchemaDocument

SCHEMA_FILENAMES = ("schema.json", "schema.yaml", "schema.yml")


def find_schema(directory: Path) -> Path:
    """Return the schema file in *directory*.

    Candidates are tried in :data:`SCHEMA_FILENAMES` order. When none
    exists the ``schema.json`` path is returned so that loading it reports
    the conventional file name.
    """
    for filename in SCHEMA_FILENAMES:
        candidate = directory / filename
        if candidate.is_file():
            return candidate
    return directory / SCHEMA_FILENAMES[0]


def load_schema(path: Path) -> SchemaDocument:
    """Read and parse a resource schema.

    Args:
        path: Path to the schema file.

    Returns:
        The parsed :class:`~provider_scripts.models.SchemaDocument`.

    Raises:
        SchemaReadError: If the file is missing or unreadable.
        SchemaParseError: If the content is not a JSON/YAML object or does
            not have the shape of a schema document.
    """
    if not path.is_file():
        raise SchemaReadError(f"Schema file not found: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SchemaReadError(f"Failed to read schema file {path}: {exc}") from exc

    suffix = path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    raw = _parse_content(content, hint=hint)

    try:
        return SchemaDocument.model_validate(raw)
    except ValidationError as exc:
        raise SchemaParseError(f"Invalid schema in {path}: {exc}") from exc


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.
    An explicit 'json' hint disables the YAML fallback.

    Raises:
        SchemaParseError: If the content cannot be parsed or is not an object.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SchemaParseError(f"Invalid JSON: {exc}") from exc
            json_error = exc
        else:
            return _require_object(result)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        msg = "Failed to parse schema as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise SchemaParseError(msg) from exc
    return _require_object(result)


def _require_object(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise SchemaParseError(f"Schema must be a JSON/YAML object (got {kind})")
    return result
