"""Validates the parsed JSON verdict returned by an AI scorer."""

import math
from typing import Any

from finscan.scoring.exceptions import ScoringValidationError
from finscan.scoring.models import AnomalyVerdict


def validate_verdict(data: dict[str, Any]) -> AnomalyVerdict:
    """Build an AnomalyVerdict from ``{isAnomaly, riskScore, reason, recommendation}``.

    Raises:
        ScoringValidationError: on any validation failure.
    """
    is_anomaly = data.get("isAnomaly")
    if not isinstance(is_anomaly, bool):
        raise ScoringValidationError("'isAnomaly' must be a boolean")

    risk_score = data.get("riskScore")
    if isinstance(risk_score, bool) or not isinstance(risk_score, (int, float)):
        raise ScoringValidationError("'riskScore' must be a number")
    if not math.isfinite(risk_score) or not 0.0 <= risk_score <= 1.0:
        raise ScoringValidationError(f"'riskScore' must be within [0, 1], got {risk_score}")

    reason = data.get("reason") or ""
    if not isinstance(reason, str):
        raise ScoringValidationError("'reason' must be a string")
    recommendation = data.get("recommendation") or ""
    if not isinstance(recommendation, str):
        raise ScoringValidationError("'recommendation' must be a string")

    return AnomalyVerdict(
        is_anomaly=is_anomaly,
        risk_score=float(risk_score),
        reason=reason.strip(),
        recommendation=recommendation.strip(),
    )
