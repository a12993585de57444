from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class ExtractionResult:
    """Structured transaction fields read from a financial document."""

    merchant: str
    category: str
    amount: Decimal
    currency: str
    transaction_date: date
    type: str | None = None
    extracted_text: str = ""
    description: str = ""
