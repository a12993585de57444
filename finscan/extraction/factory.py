from finscan.config.settings import Settings
from finscan.extraction.base import BaseExtractionProvider
from finscan.extraction.extractor import AIExtractionProvider
from finscan.extraction.file_fetcher import FileFetcher
from finscan.pdf.factory import PdfExtractorFactory
from finscan.providers.factory import ChatClientFactory


class ExtractionProviderFactory:
    """Creates the extraction provider for an already selected AI provider."""

    @classmethod
    def create(cls, provider: str, settings: Settings) -> BaseExtractionProvider:
        return AIExtractionProvider(
            chat=ChatClientFactory.create(provider, settings),
            fetcher=FileFetcher(
                timeout_seconds=settings.file_fetch_timeout_seconds,
                max_bytes=settings.upload_max_bytes,
            ),
            pdf_extractor=PdfExtractorFactory.create(settings),
        )
