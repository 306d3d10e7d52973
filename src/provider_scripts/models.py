"""Canonical Pydantic models shared across all provider_scripts modules.

This is the single source of truth for data shapes in the project. The
models fall into three groups:

**Schema models** -- the parsed resource schema (``schema.json``):
    :class:`SchemaType`, :class:`TypeReference`, :class:`ResourceDescriptor`
    and :class:`SchemaDocument`.

**Declaration models** -- the intermediate representation produced by the
type generator and rendered by a printer:
    :class:`DeclaredType`, :class:`DeclarationField`,
    :class:`TypeDeclaration` and :class:`DeclarationFile`.

**Build models** -- project discovery and pipeline results:
    :class:`LockConvention`, :class:`ProjectMetadata`, :class:`Settings`
    and :class:`BuildArtifact`.

Schema models use ``extra="allow"`` so that the many schema keys we do not
model (``description``, ``$ref``, ``items``, ``language`` ...) are tolerated
and preserved in ``model_extra``.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# --- Schema Models ---


class SchemaType(str, enum.Enum):
    """The ``type`` tag of a schema property."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    UNKNOWN = "unknown"


class TypeReference(BaseModel):
    """A single property type from a resource descriptor.

    Only the ``type`` tag is interpreted. Anything that is not one of the
    known tags -- a missing tag, an unknown name such as ``"float"``, or a
    non-string value -- resolves to :attr:`SchemaType.UNKNOWN`.
    """

    model_config = ConfigDict(extra="allow")

    type: Any = None

    @model_validator(mode="before")
    @classmethod
    def untyped_unless_object(cls, data: Any) -> Any:
        """Treat a non-object property schema (``true``, ``"string"``) as untyped."""
        if isinstance(data, (dict, TypeReference)):
            return data
        return {}

    @property
    def kind(self) -> SchemaType:
        """The resolved tag; never raises."""
        if isinstance(self.type, str):
            try:
                return SchemaType(self.type)
            except ValueError:
                pass
        return SchemaType.UNKNOWN


class ResourceDescriptor(BaseModel):
    """Input and output property shapes for one resource.

    Output properties live under ``properties``/``required`` and input
    properties under ``inputProperties``/``requiredInputs``. Either group
    may be absent, in which case the corresponding declaration has no
    fields (or, for a missing required list, only optional fields).
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    properties: Optional[dict[str, TypeReference]] = None
    required: Optional[list[str]] = None
    input_properties: Optional[dict[str, TypeReference]] = Field(
        default=None, alias="inputProperties"
    )
    required_inputs: Optional[list[str]] = Field(
        default=None, alias="requiredInputs"
    )


class SchemaDocument(BaseModel):
    """Top-level resource schema document.

    ``resources`` maps resource tokens (``package:module:Type``) to their
    descriptors, in the order they appear in the source document.
    """

    model_config = ConfigDict(extra="allow")

    resources: dict[str, ResourceDescriptor] = Field(default_factory=dict)

    @field_validator("resources", mode="before")
    @classmethod
    def null_resources_are_empty(cls, value: Any) -> Any:
        """``"resources": null`` means no resources."""
        return {} if value is None else value


# --- Declaration Models ---


class DeclaredType(str, enum.Enum):
    """Type categories a generated declaration field can have.

    Array element types and nested object shapes are erased: arrays become
    arrays of unknown and objects become string-keyed maps of unknown.
    """

    TEXT = "text"
    NUMERIC = "numeric"
    BOOLEAN = "boolean"
    UNKNOWN_ARRAY = "unknown_array"
    UNKNOWN_MAP = "unknown_map"
    UNKNOWN = "unknown"


class DeclarationField(BaseModel):
    """One read-only member of a generated declaration."""

    model_config = ConfigDict(frozen=True)

    property_name: str
    type: DeclaredType
    optional: bool


class TypeDeclaration(BaseModel):
    """A named shape such as ``WidgetInputs`` with its ordered fields."""

    model_config = ConfigDict(frozen=True)

    name: str
    fields: tuple[DeclarationField, ...] = ()


class DeclarationFile(BaseModel):
    """Everything a printer needs to render a declaration file."""

    model_config = ConfigDict(frozen=True)

    header: str
    declarations: tuple[TypeDeclaration, ...] = ()


# --- Build Models ---


class LockConvention(str, enum.Enum):
    """Which dependency lock file governs the install.

    ``CONSOLIDATED`` is npm's ``package-lock.json``; ``DISTRIBUTED`` is
    Yarn's ``yarn.lock``.
    """

    NONE = "none"
    CONSOLIDATED = "consolidated"
    DISTRIBUTED = "distributed"


class ProjectMetadata(BaseModel):
    """Facts about the provider project discovered from its directory."""

    name: str
    version: str = "0.0.0"
    has_compiled_source: bool = False
    lock_convention: LockConvention = LockConvention.NONE


class Settings(BaseModel):
    """Run configuration, resolved once at startup.

    Built by :func:`~provider_scripts.config.resolve_settings` from CLI
    flags and the process environment and passed explicitly to every
    component, so nothing below the CLI reads ``sys.argv`` or
    ``os.environ`` itself.
    """

    model_config = ConfigDict(frozen=True)

    directory: Path = Field(description="Provider project root")
    retain: bool = Field(
        default=False, description="Keep the staging directory after the build"
    )
    release_ref: Optional[str] = Field(
        default=None, description="Release tag or ref, e.g. refs/tags/v1.2.3"
    )
    plugin_host_root: Path = Field(description="Root of the plugin host, e.g. ~/.pulumi")
    environment: dict[str, str] = Field(
        default_factory=dict, description="Base environment for external tools"
    )


class BuildArtifact(BaseModel):
    """Result of a successful build."""

    staging_directory: Path
    archive_path: Path
    name: str
    version: str = Field(description="Version written into the packaged package.json")
