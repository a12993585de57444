from unittest.mock import MagicMock

import psycopg

from finscan.database.models import Document
from finscan.database.repositories.documents_repository import DocumentsRepository
from finscan.documents.service import DocumentService
from finscan.pipeline.exceptions import (
    DocumentNotFoundError,
    PipelineError,
    UnsupportedFileTypeError,
)
from finscan.pipeline.orchestrator import DocumentPipeline, UploadMetadata
from finscan.storage.base import BaseStorage
from finscan.storage.exceptions import StorageError


def _make_document(content_type: str = "image/png") -> Document:
    return Document(
        id=1,
        user_id=10,
        original_name="photo.png",
        file_id="financial_docs/abc.png",
        file_url="https://cdn.example.com/financial_docs/abc.png",
        file_size=4,
        content_type=content_type,
    )


def _make_service() -> tuple[DocumentService, MagicMock, MagicMock, MagicMock]:
    pipeline = MagicMock(spec=DocumentPipeline)
    doc_repo = MagicMock(spec=DocumentsRepository)
    storage = MagicMock(spec=BaseStorage)
    service = DocumentService(pipeline=pipeline, doc_repo=doc_repo, storage=storage)
    return service, pipeline, doc_repo, storage


class TestUpload:
    def test_returns_processing_document(self) -> None:
        service, pipeline, _repo, _storage = _make_service()
        pipeline.submit.return_value = _make_document()

        result = service.upload(b"png", "photo.png", "image/png", 10)

        assert result.success
        assert result.data.id == 1
        assert result.message == "Document uploaded successfully. AI processing started."
        pipeline.submit.assert_called_once_with(
            b"png", UploadMetadata(original_name="photo.png", content_type="image/png"), 10
        )

    def test_rejected_upload_returns_failure(self) -> None:
        service, pipeline, _repo, _storage = _make_service()
        pipeline.submit.side_effect = UnsupportedFileTypeError(
            "Only images and documents are allowed"
        )

        result = service.upload(b"x", "a.txt", "text/plain", 10)

        assert not result.success
        assert result.message == "Only images and documents are allowed"

    def test_storage_error_returns_failure(self) -> None:
        service, pipeline, _repo, _storage = _make_service()
        pipeline.submit.side_effect = StorageError("bucket unavailable")

        assert not service.upload(b"x", "a.png", "image/png", 10).success


class TestListDocuments:
    def test_passes_filters(self) -> None:
        service, _pipeline, doc_repo, _storage = _make_service()
        doc_repo.list_for_user.return_value = [_make_document()]

        result = service.list_documents(10, status="processed", search="acme")

        assert result.success
        assert len(result.data) == 1
        doc_repo.list_for_user.assert_called_once_with(10, status="processed", search="acme")

    def test_unknown_status_is_rejected(self) -> None:
        service, _pipeline, doc_repo, _storage = _make_service()

        result = service.list_documents(10, status="archived")

        assert not result.success
        doc_repo.list_for_user.assert_not_called()

    def test_database_error_returns_failure(self) -> None:
        service, _pipeline, doc_repo, _storage = _make_service()
        doc_repo.list_for_user.side_effect = psycopg.OperationalError("connection lost")

        assert not service.list_documents(10).success


class TestGetDocument:
    def test_not_found(self) -> None:
        service, _pipeline, doc_repo, _storage = _make_service()
        doc_repo.find_by_id.side_effect = DocumentNotFoundError("Document 1 not found")

        result = service.get_document(1, 99)

        assert not result.success
        assert result.message == "Document not found"

    def test_file_url(self) -> None:
        service, _pipeline, doc_repo, _storage = _make_service()
        doc_repo.find_by_id.return_value = _make_document()

        result = service.get_file_url(1, 10)

        assert result.data == "https://cdn.example.com/financial_docs/abc.png"


class TestDeleteDocument:
    def test_deletes_blob_and_record(self) -> None:
        service, _pipeline, doc_repo, storage = _make_service()
        doc_repo.find_by_id.return_value = _make_document(content_type="application/pdf")

        result = service.delete_document(1, 10)

        assert result.success
        assert result.message == "Document deleted successfully"
        storage.delete.assert_called_once_with("financial_docs/abc.png", "raw")
        doc_repo.delete.assert_called_once_with(1, 10)

    def test_storage_failure_still_deletes_record(self) -> None:
        service, _pipeline, doc_repo, storage = _make_service()
        doc_repo.find_by_id.return_value = _make_document()
        storage.delete.side_effect = StorageError("gone")

        result = service.delete_document(1, 10)

        assert result.success
        storage.delete.assert_called_once_with("financial_docs/abc.png", "image")
        doc_repo.delete.assert_called_once_with(1, 10)

    def test_foreign_document_is_not_deleted(self) -> None:
        service, _pipeline, doc_repo, storage = _make_service()
        doc_repo.find_by_id.side_effect = DocumentNotFoundError("Document 1 not found")

        result = service.delete_document(1, 99)

        assert not result.success
        storage.delete.assert_not_called()
        doc_repo.delete.assert_not_called()


class TestUploadAfterShutdown:
    def test_pipeline_shutdown_returns_failure_result(self) -> None:
        service, pipeline, _repo, _storage = _make_service()
        pipeline.submit.side_effect = PipelineError("Document pipeline is shut down")

        result = service.upload(b"png", "photo.png", "image/png", 10)

        assert not result.success
        assert result.message == "Document pipeline is shut down"
