from dataclasses import dataclass
from typing import Any

import psycopg

from finscan.config.settings import Settings
from finscan.database.models import DocumentStatus
from finscan.database.repositories.documents_repository import DocumentsRepository
from finscan.logging.logger import Log
from finscan.pipeline.exceptions import DocumentNotFoundError, PipelineError
from finscan.pipeline.orchestrator import DocumentPipeline, UploadMetadata, build_pipeline
from finscan.storage.base import BaseStorage
from finscan.storage.exceptions import StorageError
from finscan.storage.factory import StorageFactory
from finscan.storage.models import resource_kind_for

NOT_FOUND_MESSAGE = "Document not found"


@dataclass(frozen=True)
class ServiceResult:
    """Outcome of a document operation, shaped for an HTTP layer."""

    success: bool
    data: Any = None
    message: str = ""

    @classmethod
    def ok(cls, data: Any = None, message: str = "") -> "ServiceResult":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, message: str) -> "ServiceResult":
        return cls(success=False, message=message)


class DocumentService:
    """User-scoped document operations: upload, list, get, file URL, delete.

    Every method returns a ServiceResult; expected failures (rejected
    uploads, missing documents, database errors) become ``success=False``
    with a message.
    """

    def __init__(
        self,
        *,
        pipeline: DocumentPipeline,
        doc_repo: DocumentsRepository,
        storage: BaseStorage,
    ) -> None:
        self._pipeline = pipeline
        self._doc_repo = doc_repo
        self._storage = storage

    @property
    def pipeline(self) -> DocumentPipeline:
        return self._pipeline

    def upload(
        self,
        file_bytes: bytes,
        original_name: str,
        content_type: str,
        user_id: int,
    ) -> ServiceResult:
        try:
            document = self._pipeline.submit(
                file_bytes,
                UploadMetadata(original_name=original_name, content_type=content_type),
                user_id,
            )
        except (PipelineError, StorageError, psycopg.Error) as exc:
            Log.error(f"Upload error for user {user_id}: {exc}")
            return ServiceResult.fail(str(exc))
        return ServiceResult.ok(
            document,
            "Document uploaded successfully. AI processing started.",
        )

    def list_documents(
        self,
        user_id: int,
        status: str | None = None,
        search: str | None = None,
    ) -> ServiceResult:
        if status and status not in DocumentStatus.ALL:
            return ServiceResult.fail(f"Unknown status '{status}'")
        try:
            documents = self._doc_repo.list_for_user(user_id, status=status, search=search)
        except psycopg.Error as exc:
            Log.error(f"Listing documents for user {user_id} failed: {exc}")
            return ServiceResult.fail(str(exc))
        return ServiceResult.ok(documents)

    def get_document(self, document_id: int, user_id: int) -> ServiceResult:
        try:
            return ServiceResult.ok(self._doc_repo.find_by_id(document_id, user_id))
        except DocumentNotFoundError:
            return ServiceResult.fail(NOT_FOUND_MESSAGE)
        except psycopg.Error as exc:
            Log.error(f"Loading document {document_id} failed: {exc}")
            return ServiceResult.fail(str(exc))

    def get_file_url(self, document_id: int, user_id: int) -> ServiceResult:
        """URL to redirect a download or view request to."""
        result = self.get_document(document_id, user_id)
        if not result.success:
            return result
        return ServiceResult.ok(result.data.file_url)

    def delete_document(self, document_id: int, user_id: int) -> ServiceResult:
        """Delete the record; removing the stored file is best effort.

        Transactions and anomalies created from the document are kept.
        """
        found = self.get_document(document_id, user_id)
        if not found.success:
            return found
        document = found.data

        if document.file_id:
            try:
                self._storage.delete(document.file_id, resource_kind_for(document.content_type))
            except StorageError as exc:
                Log.error(f"Storage delete error for document {document_id}: {exc}")

        try:
            self._doc_repo.delete(document_id, user_id)
        except DocumentNotFoundError:
            return ServiceResult.fail(NOT_FOUND_MESSAGE)
        except psycopg.Error as exc:
            Log.error(f"Deleting document {document_id} failed: {exc}")
            return ServiceResult.fail(str(exc))
        Log.info(f"Document {document_id} deleted by user {user_id}")
        return ServiceResult.ok(message="Document deleted successfully")


def build_document_service(settings: Settings) -> DocumentService:
    """Build the service and its pipeline around one storage adapter."""
    storage = StorageFactory.create(settings)
    return DocumentService(
        pipeline=build_pipeline(settings, storage=storage),
        doc_repo=DocumentsRepository(),
        storage=storage,
    )
