from finscan.database.models import NewAnomaly
from finscan.scoring.models import AnomalyVerdict

HIGH_RISK_THRESHOLD = 0.7
MEDIUM_RISK_THRESHOLD = 0.4


def classify_severity(risk_score: float) -> str:
    """Bucket a risk score: above 0.7 is high, above 0.4 is medium, the rest low."""
    if risk_score > HIGH_RISK_THRESHOLD:
        return "high"
    if risk_score > MEDIUM_RISK_THRESHOLD:
        return "medium"
    return "low"


def build_anomaly(
    verdict: AnomalyVerdict | None,
    *,
    user_id: int,
    transaction_id: int,
    provider: str,
    scorer: str,
) -> NewAnomaly | None:
    """Turn a positive verdict into an anomaly record; None for anything else."""
    if verdict is None or not verdict.is_anomaly:
        return None
    return NewAnomaly(
        user_id=user_id,
        transaction_id=transaction_id,
        severity=classify_severity(verdict.risk_score),
        description=verdict.reason or "Unusual transaction detected",
        metadata={
            "riskScore": verdict.risk_score,
            "recommendation": verdict.recommendation,
            "aiProvider": provider,
            "scorer": scorer,
        },
    )
