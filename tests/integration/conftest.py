import os
import uuid
from collections.abc import Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest

from finscan.config.settings import Settings
from finscan.database.connection import apply_schema, close_pool, get_connection, init_pool


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "finscan_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        apply_schema()
    except Exception as e:
        close_pool()
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a disposable database"
        )
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


def _fresh_user_id() -> Generator[int, None, None]:
    """A user id no other test run shares; its rows are removed afterwards."""
    value = uuid.uuid4().int % 10**12 + 10**6
    yield value
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute("DELETE FROM anomalies WHERE user_id = %s", (value,))
            cur.execute("DELETE FROM transactions WHERE user_id = %s", (value,))
            cur.execute("DELETE FROM documents WHERE user_id = %s", (value,))
        conn.commit()


@pytest.fixture
def user_id(integration_pool: None) -> Generator[int, None, None]:
    yield from _fresh_user_id()


@pytest.fixture
def other_user_id(integration_pool: None) -> Generator[int, None, None]:
    yield from _fresh_user_id()


@pytest.fixture
def files_root(tmp_path: Path) -> Path:
    return tmp_path / "files"


@pytest.fixture
def pipeline_settings(test_settings: Settings, files_root: Path) -> Settings:
    """Settings for an offline run: local storage and the example AI provider."""
    return test_settings.model_copy(
        update={
            "storage_backend": "local",
            "storage_local_root": str(files_root),
            "storage_public_base_url": "",
            "ai_provider": "example",
            "scoring_provider": "ai",
            "pdf_engine": "pdfplumber",
        }
    )
