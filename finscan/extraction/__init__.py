from finscan.extraction.base import BaseExtractionProvider
from finscan.extraction.extractor import AIExtractionProvider
from finscan.extraction.factory import ExtractionProviderFactory
from finscan.extraction.models import ExtractionResult

__all__ = [
    "AIExtractionProvider",
    "BaseExtractionProvider",
    "ExtractionProviderFactory",
    "ExtractionResult",
]
