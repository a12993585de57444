from abc import ABC, abstractmethod

from finscan.database.models import Transaction
from finscan.scoring.models import AnomalyVerdict


class BaseAnomalyScorer(ABC):
    """Contract for all anomaly scorers."""

    name: str = ""

    @abstractmethod
    def score(
        self,
        transaction: Transaction,
        history: list[Transaction],
    ) -> AnomalyVerdict | None:
        """Assess a transaction against the user's recent history.

        Args:
            transaction: The newly created transaction.
            history: Up to 100 of the same user's most recent transactions.
                     May be empty and may include ``transaction`` itself.

        Returns:
            A verdict, or None when the scorer has no opinion. None is
            treated exactly like a negative verdict.

        Raises:
            ScoringError: on any failure.
        """
