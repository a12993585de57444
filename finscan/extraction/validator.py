"""Validates the provider's parsed JSON and builds an ExtractionResult."""

import math
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from finscan.database.models import TRANSACTION_TYPES
from finscan.extraction.exceptions import ExtractionValidationError
from finscan.extraction.models import ExtractionResult
from finscan.logging.logger import Log

_CENTS = Decimal("0.01")
_DEFAULT_CATEGORY = "Other"


def validate_and_build(data: dict[str, Any]) -> ExtractionResult:
    """Validate raw parsed JSON and build an ExtractionResult.

    Raises:
        ExtractionValidationError: on any validation failure.
    """
    return ExtractionResult(
        merchant=_required_string(data, "merchant"),
        category=_optional_string(data, "category") or _DEFAULT_CATEGORY,
        amount=_build_amount(data.get("amount")),
        currency=_build_currency(data.get("currency")),
        transaction_date=_build_date(data.get("transactionDate")),
        type=_build_type(data.get("type")),
        extracted_text=_optional_string(data, "extractedText"),
        description=_optional_string(data, "description"),
    )


def _required_string(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ExtractionValidationError(f"'{key}' must be a non-empty string")
    return value.strip()


def _optional_string(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ExtractionValidationError(f"'{key}' must be a string or null")
    return value.strip()


def _build_amount(raw: Any) -> Decimal:
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        raise ExtractionValidationError("'amount' must be a number")
    if isinstance(raw, float) and not math.isfinite(raw):
        raise ExtractionValidationError("'amount' must be finite")
    try:
        amount = Decimal(str(raw).replace(",", "").strip())
    except InvalidOperation as exc:
        raise ExtractionValidationError(f"'amount' is not a number: {raw!r}") from exc
    if not amount.is_finite():
        raise ExtractionValidationError("'amount' must be finite")
    return amount.quantize(_CENTS, rounding=ROUND_HALF_UP)


def _build_currency(raw: Any) -> str:
    if not isinstance(raw, str):
        raise ExtractionValidationError("'currency' must be a string")
    code = raw.strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise ExtractionValidationError(f"'currency' must be a 3-letter code, got {raw!r}")
    return code


def _build_date(raw: Any) -> date:
    if not isinstance(raw, str):
        raise ExtractionValidationError("'transactionDate' must be an ISO date string")
    try:
        return date.fromisoformat(raw.strip()[:10])
    except ValueError as exc:
        raise ExtractionValidationError(
            f"'transactionDate' is not an ISO date: {raw!r}"
        ) from exc


def _build_type(raw: Any) -> str | None:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise ExtractionValidationError("'type' must be a string or null")
    value = raw.strip().lower()
    if not value:
        return None
    if value not in TRANSACTION_TYPES:
        Log.warning(f"Ignoring unknown transaction type {raw!r} from provider")
        return None
    return value
