from typing import Any

import psycopg
from psycopg.rows import dict_row

from finingest.database.connection import get_connection
from finingest.database.models import JobRecord


class JobRepository:
    """Database operations for the document_jobs table."""

    def __init__(self, max_attempts: int) -> None:
        self._max_attempts = max_attempts

    def claim_next_job(self, conn: psycopg.Connection[Any]) -> JobRecord | None:
        """Claim the next pending job using SELECT FOR UPDATE SKIP LOCKED."""
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                SELECT id, document_id, status, attempts
                FROM document_jobs
                WHERE status = 'pending'
                  AND attempts < %s
                ORDER BY created_at
                LIMIT 1
                FOR UPDATE SKIP LOCKED
                """,
                (self._max_attempts,),
            )
            row = cur.fetchone()

        if row is None:
            conn.rollback()
            return None

        conn.execute(
            """
            UPDATE document_jobs
            SET status = 'claimed', locked_at = NOW(), updated_at = NOW()
            WHERE id = %s
            """,
            (row["id"],),
        )
        conn.commit()

        return JobRecord(
            id=row["id"],
            document_id=row["document_id"],
            status="claimed",
            attempts=row["attempts"],
        )

    def mark_processing(self, job_id: int) -> None:
        self._set_status(job_id, "processing")

    def mark_done(self, job_id: int) -> None:
        self._set_status(job_id, "done")

    def mark_failed(self, job_id: int, error: str) -> None:
        """Mark a job as permanently failed."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE document_jobs
                SET status = 'failed', error_message = %s, updated_at = NOW()
                WHERE id = %s
                """,
                (error, job_id),
            )
            conn.commit()

    def increment_attempts(self, job_id: int) -> None:
        """Increment attempt count and return job to pending."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE document_jobs
                SET attempts = attempts + 1, status = 'pending',
                    locked_at = NULL, updated_at = NOW()
                WHERE id = %s
                """,
                (job_id,),
            )
            conn.commit()

    def find_by_id(self, job_id: int) -> JobRecord | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, document_id, status, attempts,
                           error_message, locked_at, created_at, updated_at
                    FROM document_jobs
                    WHERE id = %s
                    """,
                    (job_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return JobRecord(**row)

    def _set_status(self, job_id: int, status: str) -> None:
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE document_jobs
                SET status = %s, updated_at = NOW()
                WHERE id = %s
                """,
                (status, job_id),
            )
            conn.commit()
