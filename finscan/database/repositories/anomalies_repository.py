from typing import Any

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from finscan.database.connection import get_connection
from finscan.database.models import Anomaly, NewAnomaly

_COLUMNS = """
    id, user_id, transaction_id, type, severity, description, status,
    metadata, created_at
"""


class AnomaliesRepository:
    """Database operations for the anomalies table."""

    def create(self, conn: psycopg.Connection[Any], values: NewAnomaly) -> Anomaly:
        """Insert an anomaly on the caller's connection. The caller commits."""
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                f"""
                INSERT INTO anomalies
                (user_id, transaction_id, type, severity, description, status, metadata)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                RETURNING {_COLUMNS}
                """,
                (
                    values.user_id,
                    values.transaction_id,
                    values.type,
                    values.severity,
                    values.description,
                    values.status,
                    Jsonb(values.metadata),
                ),
            )
            row = cur.fetchone()

        if row is None:
            raise RuntimeError("INSERT INTO anomalies returned no row")
        return self._to_anomaly(row)

    def list_for_document(self, document_id: int, user_id: int) -> list[Anomaly]:
        """Anomalies raised for transactions created from a document."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT a.id, a.user_id, a.transaction_id, a.type, a.severity,
                           a.description, a.status, a.metadata, a.created_at
                    FROM anomalies a
                    JOIN transactions t ON t.id = a.transaction_id
                    WHERE t.document_id = %s AND a.user_id = %s
                    ORDER BY a.id
                    """,
                    (document_id, user_id),
                )
                rows = cur.fetchall()

        return [self._to_anomaly(row) for row in rows]

    @staticmethod
    def _to_anomaly(row: dict[str, Any]) -> Anomaly:
        return Anomaly(
            id=row["id"],
            user_id=row["user_id"],
            transaction_id=row["transaction_id"],
            type=row["type"],
            severity=row["severity"],
            description=row["description"],
            status=row["status"],
            metadata=row["metadata"] or {},
            created_at=row["created_at"],
        )
