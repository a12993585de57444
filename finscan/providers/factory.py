from dataclasses import dataclass
from typing import ClassVar

from finscan.config.settings import Settings
from finscan.providers.client_base import BaseChatClient
from finscan.providers.example_client_adapter import ExampleClientAdapter
from finscan.providers.exceptions import ProviderConfigurationError
from finscan.providers.openai_client_adapter import OpenAIClientAdapter
from finscan.providers.selection import EXAMPLE, GEMINI, OPENAI


@dataclass(frozen=True)
class ChatModel:
    """A configured chat client together with the model parameters to call it with."""

    provider: str
    client: BaseChatClient
    model: str
    temperature: float = 0.0


class ChatClientFactory:
    """Creates the chat client for a selected provider."""

    BASE_URLS: ClassVar[dict[str, str]] = {
        GEMINI: "https://generativelanguage.googleapis.com/v1beta/openai/",
    }

    @classmethod
    def create(cls, provider: str, settings: Settings) -> ChatModel:
        if provider == EXAMPLE:
            return ChatModel(provider=EXAMPLE, client=ExampleClientAdapter(), model="example")
        if provider == GEMINI:
            return cls._build(
                provider,
                api_key=settings.gemini_api_key,
                model=settings.gemini_model_name,
                timeout_seconds=settings.gemini_timeout_seconds,
                base_url=cls.BASE_URLS[GEMINI],
                temperature=settings.ai_temperature,
            )
        if provider == OPENAI:
            return cls._build(
                provider,
                api_key=settings.openai_api_key,
                model=settings.openai_model_name,
                timeout_seconds=settings.openai_timeout_seconds,
                base_url=settings.openai_base_url.strip() or None,
                temperature=settings.ai_temperature,
            )
        raise ValueError(f"Unknown AI provider '{provider}'")

    @classmethod
    def _build(
        cls,
        provider: str,
        *,
        api_key: str,
        model: str,
        timeout_seconds: int,
        base_url: str | None,
        temperature: float,
    ) -> ChatModel:
        if not api_key.strip():
            raise ProviderConfigurationError(f"No API key configured for provider '{provider}'")
        if not model.strip():
            raise ProviderConfigurationError(f"No model name configured for provider '{provider}'")
        client = OpenAIClientAdapter(
            api_key=api_key,
            timeout_seconds=timeout_seconds,
            base_url=base_url,
        )
        return ChatModel(
            provider=provider,
            client=client,
            model=model,
            temperature=max(0.0, min(0.2, temperature)),
        )
