"""
Interface Schema - Pydantic models for node manifests and catalog records.

Defines:
- Target: named input port
- Source: named output port
- Data: presentation metadata derived from the display name and port counts
- Format: the manifest describing a node's typed interface
- Node: the catalog row combining a Format with its storage paths

Models are frozen. Wire names follow the manifest format: snake_case for
core fields, camelCase for defaultValue, backgroundColor, isPublic,
priceOneTime and pricePerRun.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import List, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from space_cli.errors import SchemaError


logger = logging.getLogger(__name__)

NODE_WIDTH = 150
BASE_HEIGHT = 125
PORT_HEIGHT = 50
BACKGROUND_COLOR = "#ffd9b3"

# Type tags offered when authoring a manifest interactively
PRIMITIVE_TYPES = [
    "bool",
    "u8",
    "u16",
    "u32",
    "u64",
    "u128",
    "i8",
    "i16",
    "i32",
    "i64",
    "f32",
    "f64",
    "pubkey",
    "keypair",
    "signature",
    "string",
    "array",
    "object",
    "json",
    "file",
]

# Display label -> value stored in the catalog
LICENSE_TYPES = {
    "MIT": "MIT",
    "Apache 2.0": "Apache",
}


class NodeType(str, Enum):
    """Kind of compiled module. WASM is the only variant."""
    WASM = "WASM"


class Target(BaseModel):
    """A named input slot."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., description="Slot name, unique within the Format")
    type_bounds: List[str] = Field(
        ...,
        min_length=1,
        description="Accepted primitive type tags, in order",
    )
    required: bool = Field(True, description="Always true for authored manifests")
    default_value: str = Field("", alias="defaultValue")
    tooltip: str = Field("")
    passthrough: bool = Field(False, description="Always false for authored manifests")


class Source(BaseModel):
    """A named output slot."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., description="Slot name, unique within the Format")
    type: str = Field(..., description="Primitive type tag")
    default_value: str = Field("", alias="defaultValue")
    tooltip: str = Field("")


class Data(BaseModel):
    """Presentation metadata for the rendered node box."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    node_id: str
    version: str
    display_name: str
    description: str
    width: int
    height: int
    background_color: str = Field(..., alias="backgroundColor")


def node_height(target_count: int, source_count: int) -> int:
    """Height of a node box large enough for its longer port list."""
    return BASE_HEIGHT + PORT_HEIGHT * max(target_count, source_count)


def _ensure_unique(names: Sequence[str], kind: str) -> None:
    seen = set()
    for name in names:
        if name in seen:
            raise ValueError(f"Duplicate {kind} name: {name!r}")
        seen.add(name)


class Format(BaseModel):
    """
    Complete interface descriptor of a node.

    Built once per upload, either from authored port lists with
    ``Format.create`` or from a manifest file with ``Format.parse``.
    Port order is the authoring order and is preserved end-to-end.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: NodeType
    data: Data
    targets: List[Target]
    sources: List[Source]

    @field_validator("targets")
    @classmethod
    def validate_unique_targets(cls, v: List[Target]) -> List[Target]:
        """Target names must be unique."""
        _ensure_unique([t.name for t in v], "input")
        return v

    @field_validator("sources")
    @classmethod
    def validate_unique_sources(cls, v: List[Source]) -> List[Source]:
        """Source names must be unique."""
        _ensure_unique([s.name for s in v], "output")
        return v

    @model_validator(mode="after")
    def warn_on_inconsistent_data(self) -> "Format":
        """Report derived presentation fields that disagree with the ports."""
        data = self.data
        if data.node_id != data.display_name.lower():
            logger.warning(
                f"Manifest node_id {data.node_id!r} does not match display name {data.display_name!r}"
            )
        expected = node_height(len(self.targets), len(self.sources))
        if data.width != NODE_WIDTH or data.height != expected:
            logger.warning(
                f"Manifest size {data.width}x{data.height} differs from {NODE_WIDTH}x{expected}"
            )
        return self

    @classmethod
    def create(
        cls,
        name: str,
        version: str,
        description: str,
        inputs: Sequence[Tuple[str, str]],
        outputs: Sequence[Tuple[str, str]],
    ) -> "Format":
        """
        Build a Format from authored ``(slot_name, type_tag)`` pairs.

        Pure: identical arguments always give identical output.

        Raises:
            SchemaError: If slot names repeat within inputs or outputs
        """
        try:
            targets = [Target(name=slot, type_bounds=[tag]) for slot, tag in inputs]
            sources = [Source(name=slot, type=tag) for slot, tag in outputs]
            data = Data(
                node_id=name.lower(),
                version=version,
                display_name=name,
                description=description,
                width=NODE_WIDTH,
                height=node_height(len(targets), len(sources)),
                background_color=BACKGROUND_COLOR,
            )
            return cls(type=NodeType.WASM, data=data, targets=targets, sources=sources)
        except ValidationError as e:
            raise SchemaError(f"Invalid interface: {e}") from e

    @classmethod
    def parse(cls, text: str) -> "Format":
        """
        Deserialize a manifest.

        Raises:
            SchemaError: If the text is not JSON or misses required fields
        """
        try:
            return cls.model_validate_json(text)
        except ValidationError as e:
            raise SchemaError(f"Invalid manifest: {e}") from e

    def to_json(self) -> str:
        """Canonical manifest text."""
        return self.model_dump_json(by_alias=True, indent=2)

    def manifest_filename(self) -> str:
        """File name the manifest is stored under, e.g. ``my_node.json``."""
        return f"{self.data.display_name.lower().replace(' ', '_')}.json"


class Node(BaseModel):
    """
    Catalog row for one published node version.

    Built exactly once, after the artifact, source and manifest are stored.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    type: NodeType
    sources: List[Source]
    targets: List[Target]
    unique_node_id: str
    data: Data
    is_public: bool = Field(..., alias="isPublic")
    storage_path: str
    source_code: str
    price_one_time: float = Field(..., alias="priceOneTime", ge=0, allow_inf_nan=False)
    price_per_run: float = Field(..., alias="pricePerRun", ge=0, allow_inf_nan=False)
    license_type: str

    @classmethod
    def create(
        cls,
        name: str,
        storage_path: str,
        source_code: str,
        format: Format,
        is_public: bool,
        price_one_time: float,
        price_per_run: float,
        license_type: str,
    ) -> "Node":
        """Flatten a Format and attach storage paths and publishing terms."""
        return cls(
            name=name,
            type=format.type,
            sources=format.sources,
            targets=format.targets,
            unique_node_id=unique_node_id(name, format.data.version),
            data=format.data,
            is_public=is_public,
            storage_path=storage_path,
            source_code=source_code,
            price_one_time=price_one_time,
            price_per_run=price_per_run,
            license_type=license_type,
        )

    def to_record(self) -> dict:
        """JSON-ready dict for the catalog insert."""
        return self.model_dump(by_alias=True, mode="json")


def unique_node_id(name: str, version: str) -> str:
    """Catalog de-duplication key, e.g. ``hello.0.1``."""
    return f"{name.lower()}.{version}"
