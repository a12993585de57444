"""AI-powered extraction of transaction fields from receipts, invoices and statements."""

import base64
from pathlib import Path

from finscan.extraction.base import BaseExtractionProvider
from finscan.extraction.exceptions import ExtractionError, UnsupportedContentTypeError
from finscan.extraction.file_fetcher import FileFetcher
from finscan.extraction.models import ExtractionResult
from finscan.extraction.validator import validate_and_build
from finscan.logging.logger import Log
from finscan.pdf.base import BasePdfExtractor
from finscan.providers.exceptions import ProviderError
from finscan.providers.factory import ChatModel
from finscan.providers.prompt_loader import (
    load_json_schema,
    load_prompt_template,
    parse_json_object,
)

_PROMPT_DIR = Path(__file__).parent / "prompts"
_SCHEMA_NAME = "extraction_result"
_IMAGE_PLACEHOLDER = "(The document is attached as an image.)"

DEFAULT_SYSTEM_PROMPT = (
    "You extract transaction data from financial documents. "
    "Answer with JSON only."
)


class AIExtractionProvider(BaseExtractionProvider):
    """Sends the document (text for PDFs, the image itself otherwise) to a chat model."""

    def __init__(
        self,
        *,
        chat: ChatModel,
        fetcher: FileFetcher,
        pdf_extractor: BasePdfExtractor,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ) -> None:
        self.name = chat.provider
        self._chat = chat
        self._fetcher = fetcher
        self._pdf_extractor = pdf_extractor
        self._system_prompt = system_prompt
        self._prompt_template = load_prompt_template(
            prompt_template_path or _PROMPT_DIR / "extraction_prompt.txt"
        )
        self._json_schema = load_json_schema(
            json_schema_path or _PROMPT_DIR / "extraction_schema.json"
        )

    def extract(self, file_url: str, content_type: str) -> ExtractionResult:
        content_type = content_type.lower()
        data = self._fetcher.fetch(file_url)
        document_text, image_data_url = self._prepare_content(data, content_type)

        prompt = self._prompt_template.format(
            content_type=content_type,
            document_text=document_text,
        )
        Log.debug(f"Extraction prompt:\n{prompt}")

        try:
            raw_response = self._chat.client.create_chat_completion(
                model=self._chat.model,
                temperature=self._chat.temperature,
                system_prompt=self._system_prompt,
                user_prompt=prompt,
                schema_name=_SCHEMA_NAME,
                json_schema=self._json_schema,
                image_data_url=image_data_url,
            )
            Log.debug(f"AI raw response:\n{raw_response}")
            parsed = parse_json_object(raw_response)
        except ProviderError as exc:
            raise ExtractionError(f"{self.name} extraction failed: {exc}") from exc

        result = validate_and_build(parsed)
        Log.info(
            f"Extraction complete with {self.name}: {result.merchant} "
            f"{result.amount} {result.currency}"
        )
        return result

    def _prepare_content(self, data: bytes, content_type: str) -> tuple[str, str | None]:
        if content_type == "application/pdf":
            text = self._pdf_extractor.extract(data)
            if not text:
                raise ExtractionError("PDF contains no extractable text")
            return text, None
        if content_type.startswith("image/"):
            encoded = base64.b64encode(data).decode("ascii")
            return _IMAGE_PLACEHOLDER, f"data:{content_type};base64,{encoded}"
        raise UnsupportedContentTypeError(f"Content type '{content_type}' is not supported")
