import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import psycopg

from finscan.database.models import Anomaly, Document, Transaction
from finscan.extraction.base import BaseExtractionProvider
from finscan.extraction.models import ExtractionResult
from finscan.scoring.base import BaseAnomalyScorer
from finscan.scoring.models import AnomalyVerdict


@dataclass(slots=True)
class PipelineContext:
    document_id: int
    user_id: int
    cancel_event: threading.Event = field(default_factory=threading.Event)
    conn: psycopg.Connection[Any] | None = None
    document: Document | None = None
    provider_name: str = ""
    extraction_provider: BaseExtractionProvider | None = None
    scorer: BaseAnomalyScorer | None = None
    extraction: ExtractionResult | None = None
    transaction: Transaction | None = None
    history: list[Transaction] = field(default_factory=list)
    verdict: AnomalyVerdict | None = None
    anomaly: Anomaly | None = None
    error_message: str = ""

    @property
    def failed(self) -> bool:
        return bool(self.error_message)


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
