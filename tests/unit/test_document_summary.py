from unittest.mock import MagicMock

import pytest

from finingest.database.models import DocumentRecord
from finingest.database.repositories.documents_repository import DocumentsRepository
from finingest.documents.types import FileKind, TabularType
from finingest.processor.document_summary import DocumentSummaryService
from finingest.processor.exceptions import DocumentNotFoundError
from finingest.summary.models import SummaryType


def _make_record(**overrides: object) -> DocumentRecord:
    fields: dict = {
        "id": 7,
        "user_id": "user-1",
        "filename": "payroll_jan.pdf",
        "file_type": "pdf",
        "file_size": 2048,
        "storage_path": "user-1/payroll_jan.pdf",
        "processing_status": "completed",
        "extracted_data": {
            "documentType": "payroll",
            "employees": [{"name": "A", "grossPay": 4000, "netPay": 3000}],
        },
    }
    fields.update(overrides)
    return DocumentRecord(**fields)


class TestDocumentSummaryService:
    def test_summarizes_stored_extraction(self) -> None:
        doc_repo = MagicMock(spec=DocumentsRepository)
        doc_repo.find_record.return_value = _make_record()

        summary = DocumentSummaryService(doc_repo).summarize(7)

        doc_repo.find_record.assert_called_once_with(7)
        assert summary.document_type is SummaryType.PAYROLL
        assert summary.title == "Payroll Jan"

    def test_suggested_questions_follow_type(self) -> None:
        doc_repo = MagicMock(spec=DocumentsRepository)
        doc_repo.find_record.return_value = _make_record()

        questions = DocumentSummaryService(doc_repo).suggested_questions(7)

        assert questions[0] == "What's my average employee cost?"

    def test_missing_document_propagates(self) -> None:
        doc_repo = MagicMock(spec=DocumentsRepository)
        doc_repo.find_record.side_effect = DocumentNotFoundError("Document 7 not found")

        with pytest.raises(DocumentNotFoundError):
            DocumentSummaryService(doc_repo).summarize(7)


class TestDocumentRecordSnapshot:
    def test_csv_record(self) -> None:
        record = _make_record(
            filename="roster.csv",
            file_type="csv",
            csv_type="employees",
            extracted_data={"headers": ["Name"], "preview": [{"Name": "A"}]},
            row_count=12,
        )

        snapshot = record.to_snapshot()

        assert snapshot.file_kind is FileKind.CSV
        assert snapshot.tabular_type is TabularType.EMPLOYEES
        assert snapshot.row_count == 12
        assert snapshot.headers == ["Name"]

    def test_unrecognized_csv_type_is_unknown(self) -> None:
        record = _make_record(file_type="csv", csv_type="bank_statement")

        assert record.to_snapshot().tabular_type is TabularType.UNKNOWN

    def test_missing_extracted_data(self) -> None:
        record = _make_record(extracted_data=None)

        snapshot = record.to_snapshot()

        assert snapshot.extracted_data == {}
        assert snapshot.preview == []
