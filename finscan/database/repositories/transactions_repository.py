from typing import Any

import psycopg
from psycopg.rows import dict_row

from finscan.database.models import NewTransaction, Transaction

HISTORY_WINDOW = 100

_COLUMNS = """
    id, user_id, document_id, merchant, amount, currency, category, type,
    date, description, status, created_at
"""


class TransactionsRepository:
    """Database operations for the transactions table.

    Both methods run on the caller's connection so that a pipeline run can
    keep its writes in a single database transaction.
    """

    def create(self, conn: psycopg.Connection[Any], values: NewTransaction) -> Transaction:
        """Insert a transaction. The caller commits."""
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                f"""
                INSERT INTO transactions
                (user_id, document_id, merchant, amount, currency, category,
                 type, date, description, status)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING {_COLUMNS}
                """,
                (
                    values.user_id,
                    values.document_id,
                    values.merchant,
                    values.amount,
                    values.currency,
                    values.category,
                    values.type,
                    values.date,
                    values.description,
                    values.status,
                ),
            )
            row = cur.fetchone()

        if row is None:
            raise RuntimeError("INSERT INTO transactions returned no row")
        return self._to_transaction(row)

    def list_recent(
        self,
        conn: psycopg.Connection[Any],
        user_id: int,
        limit: int = HISTORY_WINDOW,
    ) -> list[Transaction]:
        """Return up to ``limit`` of the user's most recent transactions.

        ``limit`` is capped at HISTORY_WINDOW.
        """
        limit = max(0, min(limit, HISTORY_WINDOW))
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM transactions
                WHERE user_id = %s
                ORDER BY created_at DESC, id DESC
                LIMIT %s
                """,
                (user_id, limit),
            )
            rows = cur.fetchall()

        return [self._to_transaction(row) for row in rows]

    @staticmethod
    def _to_transaction(row: dict[str, Any]) -> Transaction:
        return Transaction(
            id=row["id"],
            user_id=row["user_id"],
            document_id=row["document_id"],
            merchant=row["merchant"],
            amount=row["amount"],
            currency=row["currency"],
            category=row["category"],
            type=row["type"],
            date=row["date"],
            description=row["description"],
            status=row["status"],
            created_at=row["created_at"],
        )
