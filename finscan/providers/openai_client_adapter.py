from typing import Any

import httpx
import openai

from finscan.providers.client_base import BaseChatClient
from finscan.providers.exceptions import ProviderError, ProviderNetworkError


class OpenAIClientAdapter(BaseChatClient):
    """AI client adapter built on the OpenAI-compatible chat API.

    Gemini is reached through its OpenAI-compatible endpoint with the same adapter.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

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
        user_content: Any = user_prompt
        if image_data_url is not None:
            user_content = [
                {"type": "text", "text": user_prompt},
                {"type": "image_url", "image_url": {"url": image_data_url}},
            ]
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": schema_name,
                        "strict": True,
                        "schema": json_schema,
                    },
                },
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_content},
                ],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise ProviderNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise ProviderNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise ProviderError("AI returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise ProviderError("AI returned empty response")
        return content
