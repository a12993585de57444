from dataclasses import dataclass


@dataclass(frozen=True)
class AnomalyVerdict:
    """A scorer's assessment of one transaction."""

    is_anomaly: bool
    risk_score: float
    reason: str = ""
    recommendation: str = ""
