import os
import uuid
from collections.abc import Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest
from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row

from finingest.config.settings import Settings
from finingest.database.connection import close_pool, get_connection, init_pool
from finingest.database.models import JobRecord

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS documents (
        id SERIAL PRIMARY KEY,
        user_id TEXT NOT NULL,
        filename TEXT NOT NULL,
        file_type TEXT NOT NULL,
        file_size INTEGER NOT NULL,
        storage_path TEXT NOT NULL,
        processing_status TEXT NOT NULL DEFAULT 'pending',
        csv_type TEXT,
        extracted_data JSONB,
        row_count INTEGER,
        column_mappings JSONB,
        error_message TEXT,
        processed_at TIMESTAMPTZ,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS document_jobs (
        id SERIAL PRIMARY KEY,
        document_id INTEGER NOT NULL REFERENCES documents (id) ON DELETE CASCADE,
        status TEXT NOT NULL DEFAULT 'pending',
        attempts INTEGER NOT NULL DEFAULT 0,
        error_message TEXT,
        locked_at TIMESTAMPTZ,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS employees (
        id SERIAL PRIMARY KEY,
        user_id TEXT NOT NULL,
        name TEXT NOT NULL,
        role TEXT NOT NULL,
        department TEXT,
        annual_salary NUMERIC NOT NULL DEFAULT 0,
        annual_benefits NUMERIC NOT NULL DEFAULT 0,
        employment_type TEXT NOT NULL DEFAULT 'full-time',
        employee_id TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS pl_entries (
        id SERIAL PRIMARY KEY,
        user_id TEXT NOT NULL,
        entry_date TEXT,
        description TEXT NOT NULL,
        category TEXT NOT NULL DEFAULT '',
        amount NUMERIC NOT NULL,
        entry_type TEXT NOT NULL
    )
    """,
)


def _test_settings() -> Settings:
    overrides: dict[str, Any] = {}
    if "DB_DATABASE" not in os.environ:
        overrides["db_database"] = "finingest_test"
    if "EXTRACTION_PROVIDER" not in os.environ:
        overrides["extraction_provider"] = "example"
    return Settings(**overrides)


def _probe(settings: Settings) -> None:
    conninfo = make_conninfo(
        host=settings.db_host,
        port=settings.db_port,
        dbname=settings.db_database,
        user=settings.db_username,
        password=settings.db_password,
        connect_timeout=3,
    )
    with psycopg.connect(conninfo) as conn:
        for statement in _SCHEMA:
            conn.execute(statement)
        conn.commit()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        _probe(test_settings)
        init_pool(test_settings)
    except psycopg.Error as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run integration tests")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def owner_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def integration_cleanup(
    integration_pool: None, owner_id: str
) -> Generator[list[int], None, None]:
    """Collects document ids; their jobs cascade, imported rows go by owner."""
    document_ids: list[int] = []
    yield document_ids
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute("DELETE FROM employees WHERE user_id = %s", (owner_id,))
            cur.execute("DELETE FROM pl_entries WHERE user_id = %s", (owner_id,))
            for document_id in document_ids:
                cur.execute("DELETE FROM documents WHERE id = %s", (document_id,))
        conn.commit()


@pytest.fixture
def files_root(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def seed_document(
    db_conn: psycopg.Connection[Any],
    integration_cleanup: list[int],
    owner_id: str,
    files_root: Path,
):
    """Factory: write content under files_root and insert the documents row."""

    def _seed(filename: str, content: bytes) -> int:
        storage_path = f"{owner_id}/{filename}"
        target = files_root / storage_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        with db_conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO documents (user_id, filename, file_type, file_size, storage_path)
                VALUES (%s, %s, %s, %s, %s)
                RETURNING id
                """,
                (owner_id, filename, filename.rsplit(".", 1)[-1].lower(), len(content), storage_path),
            )
            row = cur.fetchone()
            assert row is not None
            document_id = row[0]
        db_conn.commit()
        integration_cleanup.append(document_id)
        return document_id

    return _seed


@pytest.fixture
def seed_job(db_conn: psycopg.Connection[Any], seed_document):
    """Factory: queue a job for a document."""

    def _seed(document_id: int, attempts: int = 0) -> JobRecord:
        with db_conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                INSERT INTO document_jobs (document_id, status, attempts)
                VALUES (%s, 'pending', %s)
                RETURNING id, document_id, status, attempts
                """,
                (document_id, attempts),
            )
            row = cur.fetchone()
            assert row is not None
        db_conn.commit()
        return JobRecord(**row)

    return _seed
