"""
Upload Orchestrator - publish an artifact, its source and manifest.

One transaction runs strictly in order:

    START -> FILES_VALIDATED -> IDENTIFIER_ASSIGNED -> MANIFEST_RESOLVED
          -> ARTIFACT_UPLOADED -> SOURCE_UPLOADED -> MANIFEST_UPLOADED
          -> CATALOG_INSERTED -> DONE

Any error moves the transaction to FAILED and is re-raised unchanged.
Blobs stored before the failure are left in place under the transaction
identifier; nothing is rolled back.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import nullcontext
from pathlib import Path
from typing import Any, Callable, ContextManager, Dict, List, Optional, Protocol

from space_cli.errors import MissingFileError, SchemaError, StorageError, UploadError
from space_cli.observability import with_upload_context
from space_cli.schema import Format, Node

from .models import PublishOptions, ResolvedManifest, UploadRequest, UploadResult, UploadStage


logger = logging.getLogger(__name__)

DEFAULT_BUCKET = "node-files"
DEFAULT_TABLE = "nodes"


class BlobStore(Protocol):
    def upload(self, bucket: str, path: str, data: bytes) -> None: ...


class Catalog(Protocol):
    def insert(self, table: str, record: Dict[str, Any]) -> None: ...


# Given "Uploading name@version...", returns a context entered around the
# network stages (e.g. a spinner)
ProgressFactory = Callable[[str], ContextManager[Any]]


class UploadOrchestrator:
    """
    Run upload transactions against a blob store and a catalog.

    The transaction identifier is generated before any network call and is
    the shared prefix of every stored key, so the three blobs of one upload
    are always ``{id}/{artifact}``, ``{id}/{source}`` and ``{id}/{manifest}``.
    """

    def __init__(
        self,
        storage: BlobStore,
        catalog: Catalog,
        bucket: str = DEFAULT_BUCKET,
        table: str = DEFAULT_TABLE,
        id_factory: Callable[[], Any] = uuid.uuid4,
    ):
        self.storage = storage
        self.catalog = catalog
        self.bucket = bucket
        self.table = table
        self.id_factory = id_factory

        self.stage = UploadStage.START
        self.stages: List[UploadStage] = [UploadStage.START]
        self.failed_stage: Optional[UploadStage] = None
        self.transaction_id: Optional[str] = None
        self.stored_keys: List[str] = []

        self._on_stage: Optional[Callable[[UploadStage], None]] = None

    def on_stage(self, callback: Callable[[UploadStage], None]) -> None:
        """Register callback invoked on every stage transition."""
        self._on_stage = callback

    def run(
        self,
        request: UploadRequest,
        progress: Optional[ProgressFactory] = None,
    ) -> UploadResult:
        """
        Execute one upload transaction.

        Args:
            request: Files, manifest source and publishing options
            progress: Optional context factory wrapped around the uploads

        Returns:
            UploadResult with the inserted Node and the stored keys

        Raises:
            MissingFileError, SchemaError, UploadError, DuplicateVersionError,
            CatalogError: As raised by the failing stage
        """
        if self.stage != UploadStage.START:
            raise RuntimeError("An orchestrator runs a single transaction")

        try:
            self._validate_files(request)
            transaction_id = self._assign_identifier()
            manifest = self._resolve_manifest(request)
            options = self._resolve_options(request, manifest.format)

            data = manifest.format.data
            message = f"Uploading {data.display_name}@{data.version}..."
            with (progress or nullcontext)(message):
                artifact_key = self._store_file(
                    request.artifact, "artifact", UploadStage.ARTIFACT_UPLOADED
                )
                source_key = self._store_file(
                    request.source, "source", UploadStage.SOURCE_UPLOADED
                )
                manifest_key = self._store(
                    f"{transaction_id}/{manifest.format.manifest_filename()}",
                    manifest.text.encode("utf-8"),
                    "manifest",
                    UploadStage.MANIFEST_UPLOADED,
                )
                node = self._insert_node(manifest.format, artifact_key, source_key, options)
        except Exception as e:
            self._fail(e)
            raise

        self._advance(UploadStage.DONE)
        logger.info(
            f"Published {node.unique_node_id}",
            extra=with_upload_context(transaction_id=transaction_id, node=node.unique_node_id),
        )

        return UploadResult(
            transaction_id=transaction_id,
            node=node,
            artifact_key=artifact_key,
            source_key=source_key,
            manifest_key=manifest_key,
            stages=list(self.stages),
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _validate_files(self, request: UploadRequest) -> None:
        for path in (request.artifact, request.source):
            if not path.exists():
                raise MissingFileError(path)
        self._advance(UploadStage.FILES_VALIDATED)

    def _assign_identifier(self) -> str:
        self.transaction_id = str(self.id_factory())
        self._advance(UploadStage.IDENTIFIER_ASSIGNED)
        return self.transaction_id

    def _resolve_manifest(self, request: UploadRequest) -> ResolvedManifest:
        if request.manifest is not None:
            manifest = read_manifest(request.manifest)
        else:
            format = request.dialogue(request.artifact)
            manifest = ResolvedManifest(format=format, text=format.to_json())
        self._advance(UploadStage.MANIFEST_RESOLVED)
        return manifest

    def _resolve_options(self, request: UploadRequest, format: Format) -> PublishOptions:
        if isinstance(request.options, PublishOptions):
            return request.options
        return request.options(format)

    def _store_file(self, path: Path, kind: str, reached: UploadStage) -> str:
        key = f"{self.transaction_id}/{path.name}"
        try:
            data = path.read_bytes()
        except OSError as e:
            raise UploadError(kind, key, e) from e
        return self._store(key, data, kind, reached)

    def _store(self, key: str, data: bytes, kind: str, reached: UploadStage) -> str:
        try:
            self.storage.upload(self.bucket, key, data)
        except StorageError as e:
            raise UploadError(kind, key, e) from e
        self.stored_keys.append(key)
        self._advance(reached)
        return key

    def _insert_node(
        self,
        format: Format,
        artifact_key: str,
        source_key: str,
        options: PublishOptions,
    ) -> Node:
        node = Node.create(
            name=format.data.display_name,
            storage_path=artifact_key,
            source_code=source_key,
            format=format,
            is_public=options.is_public,
            price_one_time=options.price_one_time,
            price_per_run=options.price_per_run,
            license_type=options.license_type,
        )
        self.catalog.insert(self.table, node.to_record())
        self._advance(UploadStage.CATALOG_INSERTED)
        return node

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------

    def _advance(self, stage: UploadStage) -> None:
        self.stage = stage
        self.stages.append(stage)
        logger.debug(
            f"Upload stage: {stage.value}",
            extra=with_upload_context(transaction_id=self.transaction_id, stage=stage.value),
        )
        if self._on_stage:
            self._on_stage(stage)

    def _fail(self, error: Exception) -> None:
        self.failed_stage = self.stage
        logger.info(
            f"Upload failed after {self.stage.value}: {error}",
            extra=with_upload_context(
                transaction_id=self.transaction_id,
                stage=self.stage.value,
                stored_keys=list(self.stored_keys),
            ),
        )
        if self.stored_keys:
            logger.warning(
                f"Stored objects left in place: {', '.join(self.stored_keys)}",
                extra=with_upload_context(transaction_id=self.transaction_id),
            )
        self._advance(UploadStage.FAILED)


def read_manifest(path: Path) -> ResolvedManifest:
    """
    Load a manifest file, keeping its text as written.

    Raises:
        MissingFileError: If the file does not exist
        SchemaError: If it cannot be read or parsed
    """
    if not path.exists():
        raise MissingFileError(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SchemaError(f"Cannot read manifest {path}: {e}") from e
    return ResolvedManifest(format=Format.parse(text), text=text)
