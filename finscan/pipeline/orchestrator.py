import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import ClassVar

from finscan.config.settings import Settings
from finscan.database.models import Document
from finscan.database.repositories.documents_repository import DocumentsRepository
from finscan.logging.logger import Log
from finscan.pipeline.exceptions import (
    EmptyFileError,
    FileTooLargeError,
    PipelineError,
    UnsupportedFileTypeError,
)
from finscan.pipeline.pipeline import PipelineContext
from finscan.pipeline.processor import Processor, build_processor
from finscan.storage.base import BaseStorage
from finscan.storage.exceptions import StorageError
from finscan.storage.factory import StorageFactory
from finscan.storage.models import resource_kind_for


@dataclass(frozen=True)
class UploadMetadata:
    """What the client told us about an uploaded file."""

    original_name: str
    content_type: str


class DocumentPipeline:
    """Accepts uploads and runs their processing in the background.

    ``submit`` returns as soon as the document exists in the processing
    state. ``run_pipeline`` is scheduled on the executor and never joined;
    its outcome is visible only through the document's persisted status.
    """

    ALLOWED_TYPES: ClassVar[dict[str, tuple[str, ...]]] = {
        "image/jpeg": (".jpg", ".jpeg"),
        "image/png": (".png",),
        "application/pdf": (".pdf",),
    }

    def __init__(
        self,
        *,
        storage: BaseStorage,
        doc_repo: DocumentsRepository,
        processor: Processor,
        settings: Settings,
        executor: Executor | None = None,
    ) -> None:
        self._storage = storage
        self._doc_repo = doc_repo
        self._processor = processor
        self._settings = settings
        self._executor = executor or ThreadPoolExecutor(
            max_workers=settings.pipeline_max_workers,
            thread_name_prefix="pipeline",
        )
        self._cancel_event = threading.Event()
        self._lock = threading.Lock()
        self._closed = False

    def submit(self, file_bytes: bytes, metadata: UploadMetadata, user_id: int) -> Document:
        """Store the file, create the document and start processing it.

        Raises:
            SubmissionError: if the upload is rejected.
            StorageError: if the blob cannot be stored.
            PipelineError: if the pipeline has been shut down. A document
                created before the shutdown was noticed is marked failed.
        """
        if self._closed:
            raise PipelineError("Document pipeline is shut down")
        content_type = self._validate(file_bytes, metadata)

        stored = self._storage.put(
            file_bytes,
            self._settings.upload_folder,
            metadata.original_name,
            content_type,
        )
        try:
            document = self._doc_repo.create(
                user_id=user_id,
                original_name=metadata.original_name,
                file_id=stored.id,
                file_url=stored.url,
                file_size=stored.size,
                content_type=content_type,
            )
        except Exception:
            self._delete_blob(stored.id, content_type)
            raise

        try:
            self._schedule(document.id, user_id)
        except PipelineError as exc:
            self._fail_unscheduled(document.id, user_id, str(exc))
            raise
        Log.info(f"Document {document.id} uploaded by user {user_id}, processing started")
        return document

    def run_pipeline(self, document_id: int, user_id: int) -> PipelineContext:
        """Drive one document to processed or failed. Never raises."""
        context = PipelineContext(
            document_id=document_id,
            user_id=user_id,
            cancel_event=self._cancel_event,
        )
        return self._processor.process(context)

    def shutdown(self, wait: bool = True, cancel: bool = False) -> None:
        """Stop accepting uploads.

        With ``cancel``, queued and in-flight pipelines stop at their next stage
        and their documents end up failed instead of staying in processing.
        """
        with self._lock:
            self._closed = True
            if cancel:
                self._cancel_event.set()
        self._executor.shutdown(wait=wait)

    def _schedule(self, document_id: int, user_id: int) -> None:
        with self._lock:
            if self._closed:
                raise PipelineError("Document pipeline is shut down")
            try:
                future = self._executor.submit(self.run_pipeline, document_id, user_id)
            except RuntimeError as exc:
                raise PipelineError("Document pipeline is shut down") from exc
        future.add_done_callback(self._log_unexpected_error)

    def _fail_unscheduled(self, document_id: int, user_id: int, error: str) -> None:
        try:
            self._doc_repo.mark_failed(document_id, user_id, error)
        except Exception as exc:
            Log.exception(f"Could not record failure for document {document_id}: {exc}")

    def _validate(self, file_bytes: bytes, metadata: UploadMetadata) -> str:
        if not file_bytes:
            raise EmptyFileError("No file uploaded")
        if len(file_bytes) > self._settings.upload_max_bytes:
            raise FileTooLargeError(
                f"File exceeds the {self._settings.upload_max_bytes} byte limit"
            )
        content_type = metadata.content_type.split(";")[0].strip().lower()
        extensions = self.ALLOWED_TYPES.get(content_type)
        suffix = PurePosixPath(metadata.original_name).suffix.lower()
        if extensions is None or suffix not in extensions:
            raise UnsupportedFileTypeError("Only images and documents are allowed")
        return content_type

    def _delete_blob(self, file_id: str, content_type: str) -> None:
        try:
            self._storage.delete(file_id, resource_kind_for(content_type))
        except StorageError as exc:
            Log.error(f"Could not remove orphaned blob {file_id}: {exc}")

    @staticmethod
    def _log_unexpected_error(future: Future[PipelineContext]) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            Log.error(f"Background processing crashed: {exc!r}")


def build_pipeline(settings: Settings, storage: BaseStorage | None = None) -> DocumentPipeline:
    """Build a DocumentPipeline with the configured storage and repositories."""
    # Each running pipeline holds one pooled connection through scoring.
    if settings.db_pool_max_size <= settings.pipeline_max_workers:
        Log.warning(
            f"db_pool_max_size ({settings.db_pool_max_size}) should exceed "
            f"pipeline_max_workers ({settings.pipeline_max_workers}); "
            "uploads and reads may wait for a connection"
        )
    return DocumentPipeline(
        storage=storage or StorageFactory.create(settings),
        doc_repo=DocumentsRepository(),
        processor=build_processor(settings),
        settings=settings,
    )
