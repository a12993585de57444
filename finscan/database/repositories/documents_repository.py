from datetime import date
from decimal import Decimal
from typing import Any

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from finscan.database.connection import get_connection
from finscan.database.models import Document, DocumentStatus
from finscan.pipeline.exceptions import DocumentNotFoundError

_COLUMNS = """
    id, user_id, original_name, file_id, file_url, file_size, content_type,
    status, merchant, category, amount, currency, transaction_date,
    extracted_data, created_at, updated_at
"""


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class DocumentsRepository:
    """Database operations for the documents table."""

    def create(
        self,
        *,
        user_id: int,
        original_name: str,
        file_id: str,
        file_url: str,
        file_size: int,
        content_type: str,
    ) -> Document:
        """Insert a new document in the processing state."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    INSERT INTO documents
                    (user_id, original_name, file_id, file_url, file_size,
                     content_type, status)
                    VALUES (%s, %s, %s, %s, %s, %s, %s)
                    RETURNING {_COLUMNS}
                    """,
                    (
                        user_id,
                        original_name,
                        file_id,
                        file_url,
                        file_size,
                        content_type,
                        DocumentStatus.PROCESSING,
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError("INSERT INTO documents returned no row")
        return self._to_document(row)

    def find_by_id(self, document_id: int, user_id: int) -> Document:
        """Find a document owned by the given user.

        Raises:
            DocumentNotFoundError: if the document does not exist or belongs
                to another user.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM documents
                    WHERE id = %s AND user_id = %s
                    """,
                    (document_id, user_id),
                )
                row = cur.fetchone()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return self._to_document(row)

    def list_for_user(
        self,
        user_id: int,
        status: str | None = None,
        search: str | None = None,
    ) -> list[Document]:
        """List a user's documents, newest first.

        ``search`` matches the original file name or the merchant,
        case-insensitively.
        """
        conditions = ["user_id = %s"]
        params: list[Any] = [user_id]
        if status:
            conditions.append("status = %s")
            params.append(status)
        if search:
            pattern = f"%{_escape_like(search)}%"
            conditions.append("(original_name ILIKE %s OR merchant ILIKE %s)")
            params.extend([pattern, pattern])

        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM documents
                    WHERE {" AND ".join(conditions)}
                    ORDER BY created_at DESC, id DESC
                    """,
                    tuple(params),
                )
                rows = cur.fetchall()

        return [self._to_document(row) for row in rows]

    def mark_processed(
        self,
        conn: psycopg.Connection[Any],
        document_id: int,
        user_id: int,
        *,
        merchant: str,
        category: str,
        amount: Decimal,
        currency: str,
        transaction_date: date,
        extracted_data: dict[str, Any],
    ) -> None:
        """Copy extracted fields onto a processing document and mark it processed.

        Runs on the caller's connection; the caller commits.

        Raises:
            DocumentNotFoundError: if no processing document matches.
        """
        with conn.cursor() as cur:
            cur.execute(
                """
                UPDATE documents
                SET merchant = %s,
                    category = %s,
                    amount = %s,
                    currency = %s,
                    transaction_date = %s,
                    extracted_data = %s,
                    status = %s,
                    updated_at = NOW()
                WHERE id = %s AND user_id = %s AND status = %s
                """,
                (
                    merchant,
                    category,
                    amount,
                    currency,
                    transaction_date,
                    Jsonb(extracted_data),
                    DocumentStatus.PROCESSED,
                    document_id,
                    user_id,
                    DocumentStatus.PROCESSING,
                ),
            )
            if cur.rowcount == 0:
                raise DocumentNotFoundError(
                    f"Document {document_id} not found in processing state"
                )

    def mark_failed(self, document_id: int, user_id: int, error: str) -> None:
        """Mark a processing document as failed and record the error.

        Raises:
            DocumentNotFoundError: if no processing document matches.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE documents
                    SET status = %s, extracted_data = %s, updated_at = NOW()
                    WHERE id = %s AND user_id = %s AND status = %s
                    """,
                    (
                        DocumentStatus.FAILED,
                        Jsonb({"error": error}),
                        document_id,
                        user_id,
                        DocumentStatus.PROCESSING,
                    ),
                )
                if cur.rowcount == 0:
                    raise DocumentNotFoundError(
                        f"Document {document_id} not found in processing state"
                    )
            conn.commit()

    def delete(self, document_id: int, user_id: int) -> None:
        """Delete a document record. Derived transactions are kept.

        Raises:
            DocumentNotFoundError: if no document matches.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "DELETE FROM documents WHERE id = %s AND user_id = %s",
                    (document_id, user_id),
                )
                if cur.rowcount == 0:
                    raise DocumentNotFoundError(f"Document {document_id} not found")
            conn.commit()

    @staticmethod
    def _to_document(row: dict[str, Any]) -> Document:
        return Document(
            id=row["id"],
            user_id=row["user_id"],
            original_name=row["original_name"],
            file_id=row["file_id"],
            file_url=row["file_url"],
            file_size=row["file_size"],
            content_type=row["content_type"],
            status=row["status"],
            merchant=row["merchant"],
            category=row["category"],
            amount=row["amount"],
            currency=row["currency"],
            transaction_date=row["transaction_date"],
            extracted_data=row["extracted_data"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
