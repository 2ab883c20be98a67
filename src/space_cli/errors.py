"""
Error taxonomy for the build-and-publish pipeline.

Every error aborts the pipeline immediately. Nothing here is retried and
nothing already uploaded is rolled back; the CLI turns any ``SpaceError``
into a one-line message on stderr and a non-zero exit code.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class SpaceError(Exception):
    """Base exception for all pipeline errors."""
    pass


class ConfigError(SpaceError):
    """Raised when the local config is missing, unreadable or invalid."""
    pass


class ProjectNotFoundError(SpaceError):
    """Raised when no project root marker exists up to the filesystem root."""

    def __init__(self, start: Path):
        self.start = start
        super().__init__(f"Project root not found above {start}")


class UnknownToolchainError(SpaceError):
    """Raised when a project root matches none of the known toolchains."""

    def __init__(self, root: Path):
        self.root = root
        super().__init__(f"No known toolchain marker in {root}")


class BuildError(SpaceError):
    """Raised when the toolchain build fails or cannot be spawned."""

    def __init__(self, toolchain: str, output: str, returncode: Optional[int] = None):
        self.toolchain = toolchain
        self.output = output
        self.returncode = returncode
        if returncode is None:
            message = f"{toolchain} build could not be started: {output}"
        else:
            message = f"{toolchain} build failed with exit code {returncode}"
            if output:
                message = f"{message}\n{output}"
        super().__init__(message)


class ArtifactNotFoundError(SpaceError):
    """Raised when a successful build produced no matching artifact."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        super().__init__(f"WASM not found matching {pattern}")


class MissingFileError(SpaceError):
    """Raised when a file required for upload does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"{path} doesn't exist")


class SchemaError(SpaceError):
    """Raised when a manifest is not valid or misses required fields."""
    pass


class OptionsError(SpaceError):
    """Raised when publishing terms (visibility, license, prices) are invalid."""
    pass


class StorageError(SpaceError):
    """Raised by the storage client on transport or HTTP failures."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class UploadError(SpaceError):
    """Raised when one of the three blob uploads fails."""

    def __init__(self, stage: str, path: str, cause: Exception):
        self.stage = stage
        self.path = path
        self.cause = cause
        super().__init__(f"Upload of {stage} to {path} failed: {cause}")


class CatalogError(SpaceError):
    """Raised when the catalog rejects an insert."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class DuplicateVersionError(CatalogError):
    """Raised when the catalog already holds the node's unique key."""

    def __init__(self, unique_node_id: str, status_code: Optional[int] = None):
        self.unique_node_id = unique_node_id
        super().__init__(
            f"Node version {unique_node_id} is already published",
            status_code=status_code,
        )


class ScaffoldError(SpaceError):
    """Raised when a new project cannot be created."""
    pass


__all__ = [
    "SpaceError",
    "ConfigError",
    "ProjectNotFoundError",
    "UnknownToolchainError",
    "BuildError",
    "ArtifactNotFoundError",
    "MissingFileError",
    "SchemaError",
    "OptionsError",
    "StorageError",
    "UploadError",
    "CatalogError",
    "DuplicateVersionError",
    "ScaffoldError",
]
