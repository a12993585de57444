from collections.abc import Callable, Sequence
from contextlib import AbstractContextManager
from typing import Any

import psycopg

from finscan.config.settings import Settings
from finscan.database.connection import get_connection
from finscan.database.repositories.anomalies_repository import AnomaliesRepository
from finscan.database.repositories.documents_repository import DocumentsRepository
from finscan.database.repositories.transactions_repository import TransactionsRepository
from finscan.logging.logger import Log
from finscan.pipeline.exceptions import PipelineCancelledError
from finscan.pipeline.pipeline import PipelineContext, PipelineStep
from finscan.pipeline.steps import (
    CreateTransactionStep,
    ExtractStep,
    FinalizeDocumentStep,
    LoadDocumentStep,
    LoadHistoryStep,
    MarkDocumentFailedStep,
    PersistAnomalyStep,
    ScoreStep,
    SelectProviderStep,
)

ConnectionFactory = Callable[[], AbstractContextManager[psycopg.Connection[Any]]]


class Processor:
    """Runs the pipeline steps for one document.

    ``prepare_steps`` run without a database transaction (loading, provider
    selection, extraction). ``persist_steps`` share one connection and are
    committed together, so a failure in any of them leaves no transaction or
    anomaly behind. Any failure is handed to ``failed_step``; ``process``
    itself never raises.
    """

    def __init__(
        self,
        *,
        prepare_steps: Sequence[PipelineStep],
        persist_steps: Sequence[PipelineStep],
        failed_step: PipelineStep,
        connection_factory: ConnectionFactory = get_connection,
    ) -> None:
        self._prepare_steps = list(prepare_steps)
        self._persist_steps = list(persist_steps)
        self._failed_step = failed_step
        self._connection_factory = connection_factory

    def process(self, context: PipelineContext) -> PipelineContext:
        Log.info(f"Processing document {context.document_id} for user {context.user_id}")
        try:
            for step in self._prepare_steps:
                self._run_step(step, context)
            self._persist(context)
        except Exception as exc:
            context.error_message = str(exc) or exc.__class__.__name__
            context.transaction = None
            context.anomaly = None
            Log.error(f"Processing document {context.document_id} failed: {context.error_message}")
            self._mark_failed(context)
            return context

        Log.info(
            f"Document {context.document_id} processed successfully "
            f"with {context.provider_name}"
        )
        return context

    def _persist(self, context: PipelineContext) -> None:
        with self._connection_factory() as conn:
            context.conn = conn
            try:
                for step in self._persist_steps:
                    self._run_step(step, context)
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                context.conn = None

    @staticmethod
    def _run_step(step: PipelineStep, context: PipelineContext) -> None:
        if context.cancel_event.is_set():
            raise PipelineCancelledError("Processing cancelled")
        step.run(context)

    def _mark_failed(self, context: PipelineContext) -> None:
        try:
            self._failed_step.run(context)
        except Exception as exc:
            Log.exception(
                f"Could not record failure for document {context.document_id}: {exc}"
            )


def build_processor(settings: Settings) -> Processor:
    """Build a Processor with all required repositories and steps."""
    doc_repo = DocumentsRepository()
    tx_repo = TransactionsRepository()
    anomaly_repo = AnomaliesRepository()
    return Processor(
        prepare_steps=[
            LoadDocumentStep(doc_repo),
            SelectProviderStep(settings),
            ExtractStep(),
        ],
        persist_steps=[
            FinalizeDocumentStep(doc_repo),
            CreateTransactionStep(tx_repo),
            LoadHistoryStep(tx_repo),
            ScoreStep(),
            PersistAnomalyStep(anomaly_repo),
        ],
        failed_step=MarkDocumentFailedStep(doc_repo),
    )
