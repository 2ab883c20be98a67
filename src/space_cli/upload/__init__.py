"""
Upload Package - the artifact-to-catalog transaction.

This package provides:
- UploadOrchestrator: runs one staged upload transaction
- UploadRequest / PublishOptions: inputs of a transaction
- UploadResult / UploadStage: outcome and stage tracking

Key guarantee: every stored key of one upload shares the transaction
identifier as prefix, and the catalog row is written only after all three
blobs are stored.
"""

from .models import (
    ManifestDialogue,
    OptionsDialogue,
    PublishOptions,
    ResolvedManifest,
    UploadRequest,
    UploadResult,
    UploadStage,
)
from .orchestrator import (
    DEFAULT_BUCKET,
    DEFAULT_TABLE,
    UploadOrchestrator,
    read_manifest,
)

__all__ = [
    # Models
    "ManifestDialogue",
    "OptionsDialogue",
    "PublishOptions",
    "ResolvedManifest",
    "UploadRequest",
    "UploadResult",
    "UploadStage",
    # Orchestrator
    "DEFAULT_BUCKET",
    "DEFAULT_TABLE",
    "UploadOrchestrator",
    "read_manifest",
]
