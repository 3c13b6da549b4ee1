from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from finingest.documents.types import FileKind, TabularType

Row = Mapping[str, Any]


@dataclass(frozen=True)
class SourceFile:
    """An uploaded file as read from blob storage."""

    filename: str
    content: bytes
    size_bytes: int
    kind: FileKind


@dataclass(frozen=True)
class TabularParseResult:
    """Headers and rows of a parsed spreadsheet.

    ``rows`` may be truncated to a preview; ``total_row_count`` always counts
    every data row in the file.
    """

    headers: tuple[str, ...]
    rows: tuple[Row, ...]
    total_row_count: int

    @property
    def is_truncated(self) -> bool:
        return len(self.rows) < self.total_row_count


@dataclass(frozen=True)
class DetectedType:
    """Outcome of header-based type detection."""

    type: TabularType
    confidence: float
    matched_columns: tuple[str, ...] = ()


@dataclass(frozen=True)
class AutoMappingResult:
    """Column mapping proposal with its confidence and auto-apply gate."""

    mappings: dict[str, str]
    confidence: float
    required_fields_mapped: int
    total_required_fields: int
    should_auto_apply: bool
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ImportOutcome:
    """Result of importing a batch of rows.

    ``rows_imported + rows_skipped == total_rows_attempted`` always holds.
    """

    success: bool
    rows_imported: int
    rows_skipped: int
    errors: list[str] = field(default_factory=list)

    @property
    def total_rows_attempted(self) -> int:
        return self.rows_imported + self.rows_skipped


@dataclass(frozen=True)
class DocumentSnapshot:
    """The subset of a stored document that summaries are derived from."""

    filename: str
    file_kind: FileKind
    extracted_data: Mapping[str, Any] = field(default_factory=dict)
    tabular_type: TabularType | None = None
    row_count: int | None = None

    @property
    def headers(self) -> Sequence[str]:
        headers = self.extracted_data.get("headers")
        return headers if isinstance(headers, list) else []

    @property
    def preview(self) -> Sequence[Row]:
        preview = self.extracted_data.get("preview")
        return preview if isinstance(preview, list) else []
