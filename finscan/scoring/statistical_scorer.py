import statistics

from finscan.database.models import Transaction
from finscan.logging.logger import Log
from finscan.scoring.base import BaseAnomalyScorer
from finscan.scoring.models import AnomalyVerdict

MIN_RELATIVE_SPREAD = 0.01
MIN_ABSOLUTE_SPREAD = 0.01


class StatisticalAnomalyScorer(BaseAnomalyScorer):
    """Flags amounts far from the user's usual spending (z-score).

    The baseline is the history in the same currency and of the same type,
    without the candidate itself. Below ``min_history`` samples there is no
    verdict.
    """

    name = "statistical"

    def __init__(self, z_threshold: float = 3.0, min_history: int = 5) -> None:
        if z_threshold <= 0:
            raise ValueError("z_threshold must be positive")
        self._z_threshold = z_threshold
        self._min_history = max(2, min_history)

    def score(
        self,
        transaction: Transaction,
        history: list[Transaction],
    ) -> AnomalyVerdict | None:
        baseline = [
            float(t.amount)
            for t in history
            if t.id != transaction.id
            and t.currency == transaction.currency
            and t.type == transaction.type
        ]
        if len(baseline) < self._min_history:
            Log.info(
                f"Not enough history to score transaction {transaction.id} "
                f"({len(baseline)} < {self._min_history})"
            )
            return None

        amount = float(transaction.amount)
        mean = statistics.fmean(baseline)
        # Flat histories get a spread of 1% of the mean (at least one cent).
        stdev = max(
            statistics.pstdev(baseline, mu=mean),
            abs(mean) * MIN_RELATIVE_SPREAD,
            MIN_ABSOLUTE_SPREAD,
        )
        z = (amount - mean) / stdev

        risk_score = round(min(1.0, abs(z) / (2 * self._z_threshold)), 4)
        is_anomaly = abs(z) >= self._z_threshold
        direction = "above" if amount >= mean else "below"
        deviation = f"{abs(z):.1f} standard deviations"
        return AnomalyVerdict(
            is_anomaly=is_anomaly,
            risk_score=risk_score,
            reason=(
                f"Amount {transaction.amount} {transaction.currency} at {transaction.merchant} "
                f"is {deviation} {direction} the usual {mean:.2f} {transaction.currency}"
            ),
            recommendation=(
                "Confirm this charge with the merchant or your bank." if is_anomaly else ""
            ),
        )
