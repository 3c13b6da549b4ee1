from unittest.mock import MagicMock

import pytest

from finingest.config.settings import Settings
from finingest.database.repositories.documents_repository import DocumentsRepository
from finingest.database.repositories.job_repository import JobRepository
from finingest.documents.exceptions import UnsupportedFileTypeError
from finingest.documents.record_store import BaseRecordStore
from finingest.documents.row_importer import RowImporter
from finingest.documents.types import ExtractionSchema, TabularType
from finingest.extraction.engine import ExtractionEngine
from finingest.extraction.exceptions import CombinedExtractionError
from finingest.extraction.models import Exhausted, ExtractionMethod, ExtractionResult, Ok
from finingest.processor.exceptions import DocumentNotFoundError
from finingest.processor.file_loader import FileLoader
from finingest.processor.models import UploadedDocument
from finingest.processor.pipeline import PipelineContext, PipelineStep
from finingest.processor.processor import Processor, build_processor
from finingest.processor.steps import (
    AutoImportStep,
    AutoMapStep,
    DetectTypeStep,
    ExtractPdfStep,
    LoadDocumentStep,
    MarkDocumentErrorStep,
    MarkProcessingStep,
    ParseTabularStep,
    PersistExtractionStep,
    PersistTabularStep,
    SummarizeStep,
    ValidateUploadStep,
)
from finingest.summary.models import SummaryType

ROSTER_CSV = b"Employee Name,Job Title,Annual Salary\nJohn,Dev,100000\nJane,PM,120000\n"

PL_DATA = {
    "documentType": "pl",
    "period": {"startDate": "2024-01-01", "endDate": "2024-03-31"},
    "revenue": {"total": 1000, "lineItems": []},
    "expenses": {"total": -400, "categories": []},
    "netIncome": 600,
    "metadata": None,
}


def _make_document(filename: str = "roster.csv") -> UploadedDocument:
    return UploadedDocument(
        id=1,
        user_id="user-1",
        filename=filename,
        file_type=filename.rsplit(".", 1)[-1],
        file_size=1024,
        storage_path=f"user-1/{filename}",
    )


class _Pipeline:
    def __init__(self, filename: str, content: bytes) -> None:
        self.file_loader = MagicMock(spec=FileLoader)
        self.doc_repo = MagicMock(spec=DocumentsRepository)
        self.job_repo = MagicMock(spec=JobRepository)
        self.store = MagicMock(spec=BaseRecordStore)
        self.engine = MagicMock(spec=ExtractionEngine)

        self.doc_repo.find_by_id.return_value = _make_document(filename)
        self.file_loader.load.return_value = content

        steps: list[PipelineStep] = [
            MarkProcessingStep(self.job_repo, self.doc_repo),
            LoadDocumentStep(file_loader=self.file_loader, doc_repo=self.doc_repo),
            ValidateUploadStep(10 * 1024 * 1024),
            ParseTabularStep(),
            DetectTypeStep(),
            AutoMapStep(),
            PersistTabularStep(self.doc_repo, preview_rows=1),
            AutoImportStep(RowImporter(self.store), self.doc_repo),
            ExtractPdfStep(self.engine),
            PersistExtractionStep(self.doc_repo),
            SummarizeStep(),
        ]
        self.processor = Processor(steps=steps, failed_step=MarkDocumentErrorStep(self.doc_repo))


class TestCsvPipeline:
    def test_detects_maps_and_auto_imports(self) -> None:
        pipeline = _Pipeline("roster.csv", ROSTER_CSV)

        context = pipeline.processor.process(document_id=1, job_id=9)

        pipeline.job_repo.mark_processing.assert_called_once_with(9)
        pipeline.doc_repo.mark_processing.assert_called_once_with(1)
        assert context.detected is not None
        assert context.detected.type is TabularType.EMPLOYEES
        assert context.mapping is not None
        assert context.mapping.should_auto_apply

        kwargs = pipeline.doc_repo.save_tabular_result.call_args.kwargs
        assert kwargs["csv_type"] == "employees"
        assert kwargs["row_count"] == 2
        assert kwargs["extracted_data"]["headers"] == ["Employee Name", "Job Title", "Annual Salary"]
        assert len(kwargs["extracted_data"]["preview"]) == 1
        assert kwargs["extracted_data"]["suggestedMappings"]["Job Title"] == "role"

        assert pipeline.store.insert.call_count == 2
        import_kwargs = pipeline.doc_repo.save_import_result.call_args.kwargs
        assert import_kwargs["outcome"].rows_imported == 2
        pipeline.engine.extract.assert_not_called()

        assert context.summary is not None
        assert context.summary.document_type is SummaryType.EMPLOYEES
        assert context.summary.item_count == 2

    def test_low_confidence_waits_for_confirmation(self) -> None:
        pipeline = _Pipeline("ledger.csv", b"Item Description,Amount\nCoffee,4.50\n")

        context = pipeline.processor.process(document_id=1, job_id=9)

        assert context.detected is not None
        assert context.detected.type is TabularType.UNKNOWN
        assert pipeline.doc_repo.save_tabular_result.call_args.kwargs["csv_type"] == "unknown"
        pipeline.doc_repo.save_import_result.assert_not_called()
        pipeline.store.insert.assert_not_called()
        assert context.import_outcome is None


class TestPdfPipeline:
    def test_extracts_and_persists(self) -> None:
        pipeline = _Pipeline("acme_pl.pdf", b"%PDF-fake")
        result = ExtractionResult(ExtractionSchema.PL, PL_DATA, 5, ExtractionMethod.VISION)
        pipeline.engine.extract.return_value = Ok(result, elapsed_ms=5)

        context = pipeline.processor.process(document_id=1, job_id=9)

        pipeline.engine.extract.assert_called_once_with(b"%PDF-fake", filename="acme_pl.pdf")
        pipeline.doc_repo.save_extraction_result.assert_called_once_with(1, PL_DATA)
        pipeline.doc_repo.save_tabular_result.assert_not_called()
        assert context.parsed is None
        assert context.summary is not None
        assert context.summary.document_type is SummaryType.PL

    def test_extraction_failure_marks_document(self) -> None:
        pipeline = _Pipeline("acme_pl.pdf", b"%PDF-fake")
        pipeline.engine.extract.return_value = Exhausted(
            causes=("vision extraction (pl) failed: bad", "generic fallback failed: bad")
        )

        with pytest.raises(CombinedExtractionError):
            pipeline.processor.process(document_id=1, job_id=9)

        pipeline.doc_repo.mark_error.assert_called_once()
        document_id, message = pipeline.doc_repo.mark_error.call_args.args
        assert document_id == 1
        assert message.startswith("We couldn't find any data to import from this file.")
        pipeline.doc_repo.save_extraction_result.assert_not_called()


class TestFailureHandling:
    def test_rejected_upload_marks_document(self) -> None:
        pipeline = _Pipeline("sheet.xlsx", b"PK")

        with pytest.raises(UnsupportedFileTypeError):
            pipeline.processor.process(document_id=1, job_id=9)

        _document_id, message = pipeline.doc_repo.mark_error.call_args.args
        assert message.startswith("We had trouble uploading this file.")

    def test_missing_document_is_not_marked(self) -> None:
        pipeline = _Pipeline("roster.csv", ROSTER_CSV)
        pipeline.doc_repo.mark_processing.side_effect = DocumentNotFoundError("Document 1 not found")

        with pytest.raises(DocumentNotFoundError):
            pipeline.processor.process(document_id=1, job_id=9)

        pipeline.doc_repo.mark_error.assert_not_called()

    def test_failed_step_sees_error(self) -> None:
        failed_step = MagicMock(spec=PipelineStep)
        broken = MagicMock(spec=PipelineStep)
        broken.applies_to.return_value = True
        broken.run.side_effect = RuntimeError("boom")
        processor = Processor(steps=[broken], failed_step=failed_step)

        with pytest.raises(RuntimeError, match="boom"):
            processor.process(document_id=3, job_id=4)

        context = failed_step.run.call_args.args[0]
        assert isinstance(context, PipelineContext)
        assert context.error_message == "boom"
        assert isinstance(context.error, RuntimeError)

    def test_skips_steps_for_other_file_kind(self) -> None:
        pipeline = _Pipeline("acme_pl.pdf", b"%PDF-fake")
        pipeline.engine.extract.return_value = Ok(
            ExtractionResult(ExtractionSchema.PL, PL_DATA, 5, ExtractionMethod.TEXT)
        )

        context = pipeline.processor.process(document_id=1, job_id=9)

        assert context.detected is None
        assert context.mapping is None


class TestBuildProcessor:
    def test_wires_every_step(self) -> None:
        settings = Settings(extraction_provider="example")

        processor = build_processor(settings, store=MagicMock(spec=BaseRecordStore))

        assert isinstance(processor, Processor)
        step_types = [type(step) for step in processor._steps]
        assert step_types[0] is MarkProcessingStep
        assert ExtractPdfStep in step_types
        assert AutoImportStep in step_types
        assert step_types[-1] is SummarizeStep
        assert isinstance(processor._failed_step, MarkDocumentErrorStep)
