from collections.abc import Mapping
from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from finingest.database.connection import get_connection
from finingest.database.models import DocumentRecord
from finingest.documents.models import ImportOutcome
from finingest.processor.exceptions import DocumentNotFoundError
from finingest.processor.models import UploadedDocument

_RECORD_COLUMNS = """
    id, user_id, filename, file_type, file_size, storage_path,
    processing_status, csv_type, extracted_data, row_count,
    column_mappings, error_message, processed_at, created_at
"""


class DocumentsRepository:
    """Database operations for the documents table."""

    def find_by_id(self, document_id: int) -> UploadedDocument:
        """Find an uploaded document by ID.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, user_id, filename, file_type, file_size,
                           storage_path, csv_type
                    FROM documents
                    WHERE id = %s
                    """,
                    (document_id,),
                )
                row = cur.fetchone()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")

        return UploadedDocument(
            id=row["id"],
            user_id=str(row["user_id"]),
            filename=row["filename"],
            file_type=row["file_type"],
            file_size=row["file_size"],
            storage_path=row["storage_path"],
            csv_type=row["csv_type"],
        )

    def find_record(self, document_id: int) -> DocumentRecord:
        """Load the full documents row, including stored extraction data.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_RECORD_COLUMNS} FROM documents WHERE id = %s",
                    (document_id,),
                )
                row = cur.fetchone()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        row["user_id"] = str(row["user_id"])
        return DocumentRecord(**row)

    def mark_processing(self, document_id: int) -> None:
        self._update(
            document_id,
            "processing_status = 'processing', error_message = NULL",
            (),
        )

    def mark_error(self, document_id: int, error_message: str) -> None:
        self._update(
            document_id,
            "processing_status = 'error', error_message = %s",
            (error_message,),
        )

    def save_tabular_result(
        self,
        document_id: int,
        *,
        csv_type: str,
        extracted_data: Mapping[str, Any],
        row_count: int,
    ) -> None:
        """Persist parsed headers/preview, detected type and row count; mark completed."""
        self._update(
            document_id,
            """
            processing_status = 'completed', csv_type = %s, extracted_data = %s,
            row_count = %s, processed_at = NOW()
            """,
            (csv_type, Jsonb(dict(extracted_data)), row_count),
        )

    def save_extraction_result(self, document_id: int, extracted_data: Mapping[str, Any]) -> None:
        """Persist the validated oracle payload; mark completed."""
        self._update(
            document_id,
            "processing_status = 'completed', extracted_data = %s, processed_at = NOW()",
            (Jsonb(dict(extracted_data)),),
        )

    def save_import_result(
        self,
        document_id: int,
        *,
        csv_type: str,
        column_mappings: Mapping[str, str],
        outcome: ImportOutcome,
    ) -> None:
        """Persist the applied mapping; a failed import leaves the document in error."""
        self._update(
            document_id,
            """
            csv_type = %s, column_mappings = %s, processing_status = %s,
            error_message = %s
            """,
            (
                csv_type,
                Jsonb(dict(column_mappings)),
                "completed" if outcome.success else "error",
                None if outcome.success else "; ".join(outcome.errors),
            ),
        )

    def _update(self, document_id: int, assignments: str, params: tuple[Any, ...]) -> None:
        """Raises DocumentNotFoundError if no row was updated."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"UPDATE documents SET {assignments} WHERE id = %s",
                    (*params, document_id),
                )
                if cur.rowcount == 0:
                    raise DocumentNotFoundError(f"Document {document_id} not found")
            conn.commit()
