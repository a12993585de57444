"""Tests for validation of extraction responses."""

from datetime import date
from decimal import Decimal
from typing import Any

import pytest

from finscan.extraction.exceptions import ExtractionValidationError
from finscan.extraction.validator import validate_and_build


def _valid_data(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "merchant": "Acme Co",
        "category": "Office",
        "amount": 42.5,
        "currency": "usd",
        "transactionDate": "2024-03-15",
        "type": None,
        "extractedText": "Acme Co Receipt Total: 42.50 USD",
        "description": "Office supplies",
    }
    data.update(overrides)
    return data


class TestValidPayload:
    def test_builds_result(self) -> None:
        result = validate_and_build(_valid_data())
        assert result.merchant == "Acme Co"
        assert result.amount == Decimal("42.50")
        assert result.currency == "USD"
        assert result.transaction_date == date(2024, 3, 15)
        assert result.type is None

    def test_amount_string_with_thousands_separator(self) -> None:
        result = validate_and_build(_valid_data(amount="1,234.567"))
        assert result.amount == Decimal("1234.57")

    def test_datetime_string_keeps_date_part(self) -> None:
        result = validate_and_build(_valid_data(transactionDate="2024-03-15T10:22:00Z"))
        assert result.transaction_date == date(2024, 3, 15)

    def test_missing_category_defaults_to_other(self) -> None:
        result = validate_and_build(_valid_data(category=None))
        assert result.category == "Other"

    def test_type_is_normalised(self) -> None:
        assert validate_and_build(_valid_data(type="Income")).type == "income"

    def test_unknown_type_is_dropped(self) -> None:
        assert validate_and_build(_valid_data(type="transfer")).type is None

    def test_optional_text_fields_default_to_empty(self) -> None:
        result = validate_and_build(_valid_data(extractedText=None, description=None))
        assert result.extracted_text == ""
        assert result.description == ""


class TestInvalidPayload:
    @pytest.mark.parametrize("merchant", [None, "", "   ", 12])
    def test_merchant_required(self, merchant: Any) -> None:
        with pytest.raises(ExtractionValidationError, match="merchant"):
            validate_and_build(_valid_data(merchant=merchant))

    @pytest.mark.parametrize("amount", [None, True, "abc", float("nan"), float("inf"), [1]])
    def test_amount_must_be_finite_number(self, amount: Any) -> None:
        with pytest.raises(ExtractionValidationError, match="amount"):
            validate_and_build(_valid_data(amount=amount))

    @pytest.mark.parametrize("currency", [None, "US", "DOLLARS", "12$"])
    def test_currency_must_be_three_letters(self, currency: Any) -> None:
        with pytest.raises(ExtractionValidationError, match="currency"):
            validate_and_build(_valid_data(currency=currency))

    @pytest.mark.parametrize("value", [None, "15/03/2024", "yesterday"])
    def test_date_must_be_iso(self, value: Any) -> None:
        with pytest.raises(ExtractionValidationError, match="transactionDate"):
            validate_and_build(_valid_data(transactionDate=value))

    def test_type_must_be_string(self) -> None:
        with pytest.raises(ExtractionValidationError, match="type"):
            validate_and_build(_valid_data(type=1))
