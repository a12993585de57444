from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any


class DocumentStatus:
    PROCESSING = "processing"
    PROCESSED = "processed"
    FAILED = "failed"

    ALL = frozenset({PROCESSING, PROCESSED, FAILED})
    TERMINAL = frozenset({PROCESSED, FAILED})


DEFAULT_TRANSACTION_TYPE = "expense"
TRANSACTION_TYPES = frozenset({"expense", "income"})
TRANSACTION_STATUS_COMPLETED = "completed"

ANOMALY_TYPE_UNUSUAL_AMOUNT = "unusual_amount"
ANOMALY_STATUS_NEW = "new"


@dataclass
class Document:
    """Represents a row from the documents table."""

    id: int
    user_id: int
    original_name: str
    file_id: str
    file_url: str
    file_size: int
    content_type: str
    status: str = DocumentStatus.PROCESSING
    merchant: str | None = None
    category: str | None = None
    amount: Decimal | None = None
    currency: str | None = None
    transaction_date: date | None = None
    extracted_data: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class NewTransaction:
    """Values for a transaction that has not been persisted yet."""

    user_id: int
    merchant: str
    amount: Decimal
    currency: str
    category: str
    date: date
    description: str = ""
    type: str = DEFAULT_TRANSACTION_TYPE
    document_id: int | None = None
    status: str = TRANSACTION_STATUS_COMPLETED


@dataclass
class Transaction:
    """Represents a row from the transactions table."""

    id: int
    user_id: int
    merchant: str
    amount: Decimal
    currency: str
    category: str
    type: str
    date: date
    description: str = ""
    status: str = TRANSACTION_STATUS_COMPLETED
    document_id: int | None = None
    created_at: datetime | None = None


@dataclass
class NewAnomaly:
    """Values for an anomaly that has not been persisted yet."""

    user_id: int
    transaction_id: int
    severity: str
    description: str
    type: str = ANOMALY_TYPE_UNUSUAL_AMOUNT
    status: str = ANOMALY_STATUS_NEW
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class Anomaly:
    """Represents a row from the anomalies table."""

    id: int
    user_id: int
    transaction_id: int
    type: str
    severity: str
    description: str
    status: str = ANOMALY_STATUS_NEW
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
