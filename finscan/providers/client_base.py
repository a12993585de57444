from abc import ABC, abstractmethod


class BaseChatClient(ABC):
    """Contract for provider-specific AI chat clients."""

    @abstractmethod
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
        """Return provider response as plain text.

        ``image_data_url`` attaches an image (``data:`` URL) to the user message.
        """
