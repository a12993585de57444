"""AI-powered anomaly scoring against a user's recent transactions."""

import json
from pathlib import Path
from typing import Any

from finscan.database.models import Transaction
from finscan.logging.logger import Log
from finscan.providers.exceptions import ProviderError
from finscan.providers.factory import ChatModel
from finscan.providers.prompt_loader import (
    load_json_schema,
    load_prompt_template,
    parse_json_object,
)
from finscan.scoring.base import BaseAnomalyScorer
from finscan.scoring.exceptions import ScoringError
from finscan.scoring.models import AnomalyVerdict
from finscan.scoring.validator import validate_verdict

_PROMPT_DIR = Path(__file__).parent / "prompts"
_SCHEMA_NAME = "anomaly_verdict"

DEFAULT_SYSTEM_PROMPT = (
    "You are a fraud analyst reviewing personal finance transactions. "
    "Answer with JSON only."
)


def _transaction_payload(transaction: Transaction) -> dict[str, Any]:
    return {
        "date": transaction.date.isoformat(),
        "merchant": transaction.merchant,
        "amount": str(transaction.amount),
        "currency": transaction.currency,
        "category": transaction.category,
        "type": transaction.type,
    }


class AIAnomalyScorer(BaseAnomalyScorer):
    """Asks a chat model whether a transaction is unusual for this user."""

    def __init__(
        self,
        *,
        chat: ChatModel,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ) -> None:
        self.name = f"ai:{chat.provider}"
        self._chat = chat
        self._system_prompt = system_prompt
        self._prompt_template = load_prompt_template(
            prompt_template_path or _PROMPT_DIR / "scoring_prompt.txt"
        )
        self._json_schema = load_json_schema(
            json_schema_path or _PROMPT_DIR / "scoring_schema.json"
        )

    def score(
        self,
        transaction: Transaction,
        history: list[Transaction],
    ) -> AnomalyVerdict | None:
        others = [t for t in history if t.id != transaction.id]
        prompt = self._prompt_template.format(
            transaction_json=json.dumps(_transaction_payload(transaction)),
            history_count=len(others),
            history_json=json.dumps([_transaction_payload(t) for t in others]),
        )
        Log.debug(f"Scoring prompt:\n{prompt}")

        try:
            raw_response = self._chat.client.create_chat_completion(
                model=self._chat.model,
                temperature=self._chat.temperature,
                system_prompt=self._system_prompt,
                user_prompt=prompt,
                schema_name=_SCHEMA_NAME,
                json_schema=self._json_schema,
            )
            parsed = parse_json_object(raw_response)
        except ProviderError as exc:
            raise ScoringError(f"{self.name} scoring failed: {exc}") from exc

        verdict = validate_verdict(parsed)
        Log.info(
            f"Scored transaction {transaction.id}: anomaly={verdict.is_anomaly} "
            f"risk={verdict.risk_score:.2f}"
        )
        return verdict
