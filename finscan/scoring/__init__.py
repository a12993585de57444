from finscan.scoring.base import BaseAnomalyScorer
from finscan.scoring.classification import build_anomaly, classify_severity
from finscan.scoring.factory import AnomalyScorerFactory
from finscan.scoring.models import AnomalyVerdict

__all__ = [
    "AnomalyScorerFactory",
    "AnomalyVerdict",
    "BaseAnomalyScorer",
    "build_anomaly",
    "classify_severity",
]
