from dataclasses import dataclass
from datetime import datetime
from typing import Any

from finingest.documents.models import DocumentSnapshot
from finingest.documents.types import FileKind, TabularType


@dataclass
class JobRecord:
    """Represents a row from the document_jobs table."""

    id: int
    document_id: int
    status: str
    attempts: int
    error_message: str | None = None
    locked_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class DocumentRecord:
    """Represents a row from the documents table."""

    id: int
    user_id: str
    filename: str
    file_type: str
    file_size: int
    storage_path: str
    processing_status: str
    csv_type: str | None = None
    extracted_data: dict[str, Any] | None = None
    row_count: int | None = None
    column_mappings: dict[str, str] | None = None
    error_message: str | None = None
    processed_at: datetime | None = None
    created_at: datetime | None = None

    def to_snapshot(self) -> DocumentSnapshot:
        file_kind = FileKind.PDF if self.file_type == FileKind.PDF.value else FileKind.CSV
        tabular_type: TabularType | None = None
        if self.csv_type:
            try:
                tabular_type = TabularType(self.csv_type)
            except ValueError:
                tabular_type = TabularType.UNKNOWN
        return DocumentSnapshot(
            filename=self.filename,
            file_kind=file_kind,
            extracted_data=self.extracted_data or {},
            tabular_type=tabular_type,
            row_count=self.row_count,
        )
