"""
Upload Models - stages, requests and results of an upload transaction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from space_cli.schema import LICENSE_TYPES, Format, Node


class UploadStage(str, Enum):
    """Stage reached by an upload transaction."""
    START = "start"
    FILES_VALIDATED = "files_validated"
    IDENTIFIER_ASSIGNED = "identifier_assigned"
    MANIFEST_RESOLVED = "manifest_resolved"
    ARTIFACT_UPLOADED = "artifact_uploaded"
    SOURCE_UPLOADED = "source_uploaded"
    MANIFEST_UPLOADED = "manifest_uploaded"
    CATALOG_INSERTED = "catalog_inserted"
    DONE = "done"
    FAILED = "failed"


class PublishOptions(BaseModel):
    """Visibility, pricing and license of a published node."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    is_public: bool = Field(True, description="List the node publicly")
    license_type: str = Field("MIT", description="Stored license value")
    price_one_time: float = Field(0.0, ge=0, allow_inf_nan=False, description="One-time price")
    price_per_run: float = Field(0.0, ge=0, allow_inf_nan=False, description="Price per run")


# Asked once the manifest is known; receives the artifact path
ManifestDialogue = Callable[[Path], Format]
OptionsDialogue = Callable[[Format], PublishOptions]


@dataclass(frozen=True)
class UploadRequest:
    """
    Files and choices for one upload.

    Exactly one of ``manifest`` (a manifest file) or ``dialogue`` (an
    interactive author) must be given.
    """
    artifact: Path
    source: Path
    manifest: Optional[Path] = None
    dialogue: Optional[ManifestDialogue] = None
    options: Union[PublishOptions, OptionsDialogue] = field(default_factory=PublishOptions)

    def __post_init__(self) -> None:
        if (self.manifest is None) == (self.dialogue is None):
            raise ValueError("Exactly one of manifest or dialogue is required")
        if isinstance(self.options, PublishOptions):
            if self.options.license_type not in LICENSE_TYPES.values():
                raise ValueError(f"Unknown license: {self.options.license_type}")


@dataclass(frozen=True)
class ResolvedManifest:
    """A Format together with the exact text that will be stored."""
    format: Format
    text: str


class UploadResult(BaseModel):
    """Outcome of a completed upload transaction."""
    model_config = ConfigDict(frozen=True)

    transaction_id: str = Field(..., description="Shared prefix of all stored keys")
    node: Node = Field(..., description="Inserted catalog row")
    artifact_key: str
    source_key: str
    manifest_key: str
    stages: List[UploadStage] = Field(default_factory=list)

    @property
    def keys(self) -> Dict[str, str]:
        return {
            "artifact": self.artifact_key,
            "source": self.source_key,
            "manifest": self.manifest_key,
        }
