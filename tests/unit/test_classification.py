import pytest

from finscan.scoring.classification import build_anomaly, classify_severity
from finscan.scoring.models import AnomalyVerdict


class TestClassifySeverity:
    @pytest.mark.parametrize(
        ("risk_score", "expected"),
        [
            (0.95, "high"),
            (0.75, "high"),
            (0.7, "medium"),
            (0.55, "medium"),
            (0.4, "low"),
            (0.2, "low"),
            (0.0, "low"),
        ],
    )
    def test_thresholds(self, risk_score: float, expected: str) -> None:
        assert classify_severity(risk_score) == expected


class TestBuildAnomaly:
    def _build(self, verdict: AnomalyVerdict | None):  # type: ignore[no-untyped-def]
        return build_anomaly(
            verdict,
            user_id=10,
            transaction_id=55,
            provider="gemini",
            scorer="ai:gemini",
        )

    def test_positive_verdict_creates_anomaly(self) -> None:
        anomaly = self._build(
            AnomalyVerdict(
                is_anomaly=True,
                risk_score=0.85,
                reason="Ten times the usual amount",
                recommendation="Check with the merchant",
            )
        )
        assert anomaly is not None
        assert anomaly.severity == "high"
        assert anomaly.type == "unusual_amount"
        assert anomaly.status == "new"
        assert anomaly.transaction_id == 55
        assert anomaly.description == "Ten times the usual amount"
        assert anomaly.metadata == {
            "riskScore": 0.85,
            "recommendation": "Check with the merchant",
            "aiProvider": "gemini",
            "scorer": "ai:gemini",
        }

    def test_missing_reason_gets_default_description(self) -> None:
        anomaly = self._build(AnomalyVerdict(is_anomaly=True, risk_score=0.5))
        assert anomaly is not None
        assert anomaly.severity == "medium"
        assert anomaly.description == "Unusual transaction detected"

    def test_negative_verdict_creates_nothing(self) -> None:
        assert self._build(AnomalyVerdict(is_anomaly=False, risk_score=0.95)) is None

    def test_no_verdict_creates_nothing(self) -> None:
        assert self._build(None) is None
