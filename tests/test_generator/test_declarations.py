"""Tests for provider_scripts.generator.declarations.

Covers:
- Schema type tag -> declared type mapping, including unknown tags
- Required/optional field mapping per property group
- Resource token -> type name
- Declaration ordering and determinism
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from provider_scripts.exceptions import SchemaParseError
from provider_scripts.generator import generate_provider_types
from provider_scripts.generator.declarations import (
    HEADER_WARNING,
    build_declarations,
    build_fields,
    declared_type,
    type_name_from_token,
)
from provider_scripts.models import (
    DeclarationField,
    DeclaredType,
    SchemaDocument,
    TypeReference,
)


def _schema(resources: dict[str, Any]) -> SchemaDocument:
    return SchemaDocument.model_validate({"resources": resources})


# ------------------------------------------------------------------ #
# declared_type
# ------------------------------------------------------------------ #


class TestDeclaredType:
    @pytest.mark.parametrize(
        ("tag", "expected"),
        [
            ("string", DeclaredType.TEXT),
            ("integer", DeclaredType.NUMERIC),
            ("number", DeclaredType.NUMERIC),
            ("boolean", DeclaredType.BOOLEAN),
            ("array", DeclaredType.UNKNOWN_ARRAY),
            ("object", DeclaredType.UNKNOWN_MAP),
        ],
    )
    def test_known_tags(self, tag: str, expected: DeclaredType) -> None:
        assert declared_type(TypeReference(type=tag)) is expected

    @pytest.mark.parametrize("tag", [None, "float", "String", "", 42, ["string"], "unknown"])
    def test_anything_else_is_unknown(self, tag: Any) -> None:
        assert declared_type(TypeReference(type=tag)) is DeclaredType.UNKNOWN

    @pytest.mark.parametrize("raw", [True, False, "string", 3, None, ["string"]])
    def test_non_object_property_schema_is_unknown(self, raw: Any) -> None:
        assert declared_type(TypeReference.model_validate(raw)) is DeclaredType.UNKNOWN

    def test_non_object_properties_load_end_to_end(self, tmp_path: Path) -> None:
        (tmp_path / "schema.json").write_text(
            json.dumps(
                {
                    "resources": {
                        "a:b:C": {
                            "properties": {"x": True, "y": "string"},
                            "inputProperties": {"z": 7},
                            "requiredInputs": ["z"],
                        }
                    }
                }
            ),
            encoding="utf-8",
        )
        text = generate_provider_types(tmp_path).read_text(encoding="utf-8")
        assert (
            "export interface CInputs {\n"
            "    readonly z: unknown;\n"
            "}\n"
            "export interface COutputs {\n"
            "    readonly x?: unknown;\n"
            "    readonly y?: unknown;\n"
            "}\n"
        ) in text

    def test_missing_tag_is_unknown(self) -> None:
        reference = TypeReference.model_validate({"$ref": "#/types/acme:index:Thing"})
        assert declared_type(reference) is DeclaredType.UNKNOWN

    def test_array_items_are_erased(self) -> None:
        reference = TypeReference.model_validate(
            {"type": "array", "items": {"type": "string"}}
        )
        assert declared_type(reference) is DeclaredType.UNKNOWN_ARRAY

    def test_object_properties_are_erased(self) -> None:
        reference = TypeReference.model_validate(
            {"type": "object", "additionalProperties": {"type": "integer"}}
        )
        assert declared_type(reference) is DeclaredType.UNKNOWN_MAP


# ------------------------------------------------------------------ #
# type_name_from_token
# ------------------------------------------------------------------ #


class TestTypeNameFromToken:
    def test_third_segment(self) -> None:
        assert type_name_from_token("acme:index:Widget") == "Widget"

    def test_module_with_slash(self) -> None:
        assert type_name_from_token("acme:storage/v1:Bucket") == "Bucket"

    @pytest.mark.parametrize("token", ["acme", "acme:Widget", "acme:index:"])
    def test_malformed(self, token: str) -> None:
        with pytest.raises(SchemaParseError, match="Invalid resource token"):
            type_name_from_token(token)


# ------------------------------------------------------------------ #
# build_fields
# ------------------------------------------------------------------ #


class TestBuildFields:
    def test_required_and_optional(self) -> None:
        fields = build_fields(
            {"a": TypeReference(type="string"), "b": TypeReference(type="boolean")},
            ["a"],
        )
        assert fields == (
            DeclarationField(property_name="a", type=DeclaredType.TEXT, optional=False),
            DeclarationField(property_name="b", type=DeclaredType.BOOLEAN, optional=True),
        )

    def test_absent_required_list_means_all_optional(self) -> None:
        fields = build_fields({"a": TypeReference(type="string")}, None)
        assert [f.optional for f in fields] == [True]

    def test_required_names_without_properties_are_ignored(self) -> None:
        fields = build_fields({"a": TypeReference(type="string")}, ["a", "ghost"])
        assert [f.property_name for f in fields] == ["a"]

    def test_no_properties(self) -> None:
        assert build_fields(None, ["a"]) == ()
        assert build_fields({}, None) == ()

    def test_preserves_property_order(self) -> None:
        names = ["zeta", "alpha", "mid"]
        fields = build_fields({n: TypeReference(type="string") for n in names}, None)
        assert [f.property_name for f in fields] == names


# ------------------------------------------------------------------ #
# build_declarations
# ------------------------------------------------------------------ #


class TestBuildDeclarations:
    def test_widget_scenario(self) -> None:
        schema = _schema(
            {
                "acme:index:Widget": {
                    "inputProperties": {"size": {"type": "integer"}},
                    "requiredInputs": ["size"],
                    "properties": {"label": {"type": "string"}},
                    "required": ["label"],
                }
            }
        )
        result = build_declarations(schema)
        inputs, outputs = result.declarations
        assert inputs.name == "WidgetInputs"
        assert inputs.fields == (
            DeclarationField(property_name="size", type=DeclaredType.NUMERIC, optional=False),
        )
        assert outputs.name == "WidgetOutputs"
        assert outputs.fields == (
            DeclarationField(property_name="label", type=DeclaredType.TEXT, optional=False),
        )

    def test_input_and_output_required_sets_are_independent(self) -> None:
        schema = _schema(
            {
                "acme:index:Widget": {
                    "inputProperties": {"name": {"type": "string"}},
                    "requiredInputs": [],
                    "properties": {"name": {"type": "string"}},
                    "required": ["name"],
                }
            }
        )
        inputs, outputs = build_declarations(schema).declarations
        assert inputs.fields[0].optional is True
        assert outputs.fields[0].optional is False

    def test_resource_order_follows_schema(self) -> None:
        schema = _schema({"a:b:Second": {}, "a:b:First": {}})
        names = [d.name for d in build_declarations(schema).declarations]
        assert names == ["SecondInputs", "SecondOutputs", "FirstInputs", "FirstOutputs"]

    def test_empty_schema(self) -> None:
        result = build_declarations(SchemaDocument())
        assert result.declarations == ()
        assert result.header == HEADER_WARNING

    def test_deterministic(self) -> None:
        raw = {
            "acme:index:Widget": {
                "inputProperties": {"size": {"type": "integer"}, "tags": {"type": "array"}},
                "properties": {"meta": {"type": "object"}},
            }
        }
        assert build_declarations(_schema(raw)) == build_declarations(_schema(raw))

    def test_malformed_token(self) -> None:
        with pytest.raises(SchemaParseError):
            build_declarations(_schema({"Widget": {}}))
