"""Example AI client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseChatClient and register the provider in ChatClientFactory.
"""

import json
from typing import ClassVar

from finscan.providers.client_base import BaseChatClient
from finscan.providers.exceptions import ProviderError


class ExampleClientAdapter(BaseChatClient):
    """Example adapter that returns a fixed valid JSON payload per schema.

    No network calls. Useful for local development and tests.
    """

    DEFAULT_RESPONSES: ClassVar[dict[str, dict[str, object]]] = {
        "extraction_result": {
            "merchant": "Example Merchant",
            "category": "Other",
            "amount": 0.0,
            "currency": "USD",
            "transactionDate": "1970-01-01",
            "type": None,
            "extractedText": "",
            "description": "Example extraction",
        },
        "anomaly_verdict": {
            "isAnomaly": False,
            "riskScore": 0.0,
            "reason": "No anomaly detected",
            "recommendation": "",
        },
    }

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        schema_name: str,
        json_schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> str:
        _ = model, temperature, system_prompt, user_prompt, json_schema, image_data_url
        response = self.DEFAULT_RESPONSES.get(schema_name)
        if response is None:
            raise ProviderError(f"Example adapter has no response for schema '{schema_name}'")
        return json.dumps(response)
