from typing import Any

import psycopg

from finscan.config.settings import Settings
from finscan.database.models import DEFAULT_TRANSACTION_TYPE, DocumentStatus, NewTransaction
from finscan.database.repositories.anomalies_repository import AnomaliesRepository
from finscan.database.repositories.documents_repository import DocumentsRepository
from finscan.database.repositories.transactions_repository import (
    HISTORY_WINDOW,
    TransactionsRepository,
)
from finscan.extraction.factory import ExtractionProviderFactory
from finscan.logging.logger import Log
from finscan.pipeline.exceptions import PipelineError
from finscan.pipeline.pipeline import PipelineContext, PipelineStep
from finscan.providers.selection import select_provider
from finscan.scoring.classification import build_anomaly
from finscan.scoring.factory import AnomalyScorerFactory


def _require_conn(context: PipelineContext) -> psycopg.Connection[Any]:
    if context.conn is None:
        raise ValueError("PipelineContext.conn must be set for persisting steps")
    return context.conn


class LoadDocumentStep(PipelineStep):
    def __init__(self, doc_repo: DocumentsRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        document = self._doc_repo.find_by_id(context.document_id, context.user_id)
        if document.status != DocumentStatus.PROCESSING:
            raise PipelineError(
                f"Document {document.id} is already {document.status}"
            )
        context.document = document
        return context


class SelectProviderStep(PipelineStep):
    """Resolves the AI provider once and builds this run's extractor and scorer."""

    def __init__(
        self,
        settings: Settings,
        extraction_factory: type[ExtractionProviderFactory] = ExtractionProviderFactory,
        scorer_factory: type[AnomalyScorerFactory] = AnomalyScorerFactory,
    ) -> None:
        self._settings = settings
        self._extraction_factory = extraction_factory
        self._scorer_factory = scorer_factory

    def run(self, context: PipelineContext) -> PipelineContext:
        provider = select_provider(self._settings)
        context.provider_name = provider
        context.extraction_provider = self._extraction_factory.create(provider, self._settings)
        context.scorer = self._scorer_factory.create(provider, self._settings)
        Log.info(f"Document {context.document_id}: using AI provider {provider}")
        return context


class ExtractStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        if context.document is None or context.extraction_provider is None:
            raise ValueError("PipelineContext.document and extraction_provider must be set")
        context.extraction = context.extraction_provider.extract(
            context.document.file_url,
            context.document.content_type,
        )
        return context


class FinalizeDocumentStep(PipelineStep):
    def __init__(self, doc_repo: DocumentsRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        extraction = context.extraction
        if extraction is None:
            raise ValueError("PipelineContext.extraction must be set before finalizing")
        self._doc_repo.mark_processed(
            _require_conn(context),
            context.document_id,
            context.user_id,
            merchant=extraction.merchant,
            category=extraction.category,
            amount=extraction.amount,
            currency=extraction.currency,
            transaction_date=extraction.transaction_date,
            extracted_data={
                "text": extraction.extracted_text,
                "aiProvider": context.provider_name,
                "description": extraction.description,
            },
        )
        Log.info(f"Document {context.document_id} marked as processed")
        return context


class CreateTransactionStep(PipelineStep):
    def __init__(self, tx_repo: TransactionsRepository) -> None:
        self._tx_repo = tx_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        extraction = context.extraction
        if extraction is None:
            raise ValueError("PipelineContext.extraction must be set before creating a transaction")
        context.transaction = self._tx_repo.create(
            _require_conn(context),
            NewTransaction(
                user_id=context.user_id,
                document_id=context.document_id,
                merchant=extraction.merchant,
                amount=extraction.amount,
                currency=extraction.currency,
                category=extraction.category,
                type=extraction.type or DEFAULT_TRANSACTION_TYPE,
                date=extraction.transaction_date,
                description=extraction.description,
            ),
        )
        Log.info(
            f"Created transaction {context.transaction.id} from document {context.document_id}"
        )
        return context


class LoadHistoryStep(PipelineStep):
    def __init__(self, tx_repo: TransactionsRepository) -> None:
        self._tx_repo = tx_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        context.history = self._tx_repo.list_recent(
            _require_conn(context),
            context.user_id,
            limit=HISTORY_WINDOW,
        )
        Log.debug(f"Loaded {len(context.history)} transactions of history for user {context.user_id}")
        return context


class ScoreStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        if context.transaction is None or context.scorer is None:
            raise ValueError("PipelineContext.transaction and scorer must be set before scoring")
        context.verdict = context.scorer.score(context.transaction, context.history)
        return context


class PersistAnomalyStep(PipelineStep):
    def __init__(self, anomaly_repo: AnomaliesRepository) -> None:
        self._anomaly_repo = anomaly_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.transaction is None or context.scorer is None:
            raise ValueError("PipelineContext.transaction and scorer must be set before persist")
        values = build_anomaly(
            context.verdict,
            user_id=context.user_id,
            transaction_id=context.transaction.id,
            provider=context.provider_name,
            scorer=context.scorer.name,
        )
        if values is None:
            return context
        context.anomaly = self._anomaly_repo.create(_require_conn(context), values)
        Log.warning(
            f"Anomaly {context.anomaly.id} ({values.severity}) raised for "
            f"transaction {context.transaction.id}"
        )
        return context


class MarkDocumentFailedStep(PipelineStep):
    def __init__(self, doc_repo: DocumentsRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        self._doc_repo.mark_failed(context.document_id, context.user_id, context.error_message)
        Log.error(f"Document {context.document_id} marked as failed: {context.error_message}")
        return context
