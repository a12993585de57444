from typing import Any

import pytest

from finscan.scoring.exceptions import ScoringValidationError
from finscan.scoring.validator import validate_verdict


def _valid_data(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "isAnomaly": True,
        "riskScore": 0.85,
        "reason": " Much larger than usual ",
        "recommendation": "Verify the charge",
    }
    data.update(overrides)
    return data


class TestValidateVerdict:
    def test_builds_verdict(self) -> None:
        verdict = validate_verdict(_valid_data())
        assert verdict.is_anomaly is True
        assert verdict.risk_score == 0.85
        assert verdict.reason == "Much larger than usual"

    def test_integer_score_accepted(self) -> None:
        assert validate_verdict(_valid_data(riskScore=1)).risk_score == 1.0

    def test_missing_texts_default_to_empty(self) -> None:
        verdict = validate_verdict(_valid_data(reason=None, recommendation=None))
        assert verdict.reason == ""
        assert verdict.recommendation == ""

    @pytest.mark.parametrize("value", [None, "true", 1])
    def test_is_anomaly_must_be_bool(self, value: Any) -> None:
        with pytest.raises(ScoringValidationError, match="isAnomaly"):
            validate_verdict(_valid_data(isAnomaly=value))

    @pytest.mark.parametrize("value", [None, "0.5", True, -0.1, 1.5, float("nan")])
    def test_risk_score_must_be_in_range(self, value: Any) -> None:
        with pytest.raises(ScoringValidationError, match="riskScore"):
            validate_verdict(_valid_data(riskScore=value))

    def test_reason_must_be_string(self) -> None:
        with pytest.raises(ScoringValidationError, match="reason"):
            validate_verdict(_valid_data(reason=["a"]))
