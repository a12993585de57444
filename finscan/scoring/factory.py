from finscan.config.settings import Settings
from finscan.providers.factory import ChatClientFactory
from finscan.scoring.ai_scorer import AIAnomalyScorer
from finscan.scoring.base import BaseAnomalyScorer
from finscan.scoring.statistical_scorer import StatisticalAnomalyScorer


class AnomalyScorerFactory:
    """Creates the scorer named by ``scoring_provider``."""

    SCORERS = ("ai", "statistical")

    @classmethod
    def create(cls, provider: str, settings: Settings) -> BaseAnomalyScorer:
        """Create the configured scorer; the AI scorer uses the selected AI provider."""
        scorer = settings.scoring_provider.lower()
        if scorer == "ai":
            return AIAnomalyScorer(chat=ChatClientFactory.create(provider, settings))
        if scorer == "statistical":
            return StatisticalAnomalyScorer(
                z_threshold=settings.anomaly_z_threshold,
                min_history=settings.anomaly_min_history,
            )
        raise ValueError(
            f"Unknown scoring provider '{scorer}'. Choose from: {list(cls.SCORERS)}"
        )
