from finingest.database.repositories.documents_repository import DocumentsRepository
from finingest.database.repositories.job_repository import JobRepository
from finingest.documents.column_mapper import auto_map_columns, mapping_confidence_label
from finingest.documents.exceptions import UploadValidationError
from finingest.documents.models import DocumentSnapshot, SourceFile
from finingest.documents.row_importer import RowImporter
from finingest.documents.scoring import DetectionConfig, MatchWeights
from finingest.documents.tabular_parser import parse_csv_bytes
from finingest.documents.type_detector import detect_tabular_type
from finingest.documents.types import FileKind, TabularType
from finingest.documents.upload_validator import validate_upload
from finingest.errors.friendly_errors import ErrorContext, get_friendly_error
from finingest.extraction.engine import ExtractionEngine
from finingest.logging.logger import Log
from finingest.processor.exceptions import DocumentNotFoundError
from finingest.processor.file_loader import FileLoader
from finingest.processor.pipeline import PipelineContext, PipelineStep
from finingest.summary.config import SummaryConfig
from finingest.summary.smart_summary import generate_smart_summary


class MarkProcessingStep(PipelineStep):
    def __init__(self, job_repo: JobRepository, doc_repo: DocumentsRepository) -> None:
        self._job_repo = job_repo
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        self._job_repo.mark_processing(context.job_id)
        self._doc_repo.mark_processing(context.document_id)
        Log.info(f"Job {context.job_id} marked as processing")
        return context


class MarkDocumentErrorStep(PipelineStep):
    """Failure hook: stores a user-facing message on the document."""

    def __init__(self, doc_repo: DocumentsRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if isinstance(context.error, DocumentNotFoundError):
            Log.error(f"Document {context.document_id} not found: nothing to mark")
            return context
        error_context = (
            ErrorContext.DOCUMENT_UPLOAD
            if isinstance(context.error, UploadValidationError)
            else ErrorContext.DOCUMENT_PROCESSING
        )
        friendly = get_friendly_error(context.error or context.error_message, error_context)
        self._doc_repo.mark_error(context.document_id, friendly.as_text())
        Log.error(
            f"Document {context.document_id} marked as error: {context.error_message}",
            retryable=friendly.is_retryable,
        )
        return context


class LoadDocumentStep(PipelineStep):
    def __init__(self, file_loader: FileLoader, doc_repo: DocumentsRepository) -> None:
        self._file_loader = file_loader
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        document = self._doc_repo.find_by_id(context.document_id)
        context.document = document
        context.raw_bytes = self._file_loader.load(document)
        Log.info(f"Loaded {len(context.raw_bytes)} bytes for document {context.document_id}")
        return context


class ValidateUploadStep(PipelineStep):
    def __init__(self, max_upload_bytes: int) -> None:
        self._max_upload_bytes = max_upload_bytes

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.document is None:
            raise ValueError("PipelineContext.document must be set before validation")
        kind = validate_upload(
            context.document.filename, len(context.raw_bytes), self._max_upload_bytes
        )
        context.source = SourceFile(
            filename=context.document.filename,
            content=context.raw_bytes,
            size_bytes=len(context.raw_bytes),
            kind=kind,
        )
        return context


class ParseTabularStep(PipelineStep):
    file_kind = FileKind.CSV

    def run(self, context: PipelineContext) -> PipelineContext:
        context.parsed = parse_csv_bytes(context.raw_bytes)
        return context


class DetectTypeStep(PipelineStep):
    file_kind = FileKind.CSV

    def __init__(self, config: DetectionConfig | None = None) -> None:
        self._config = config or DetectionConfig()

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.parsed is None:
            raise ValueError("PipelineContext.parsed must be set before type detection")
        context.detected = detect_tabular_type(context.parsed.headers, self._config)
        Log.info(
            f"Detected type for document {context.document_id}",
            type=context.detected.type.value,
            confidence=context.detected.confidence,
        )
        return context


class AutoMapStep(PipelineStep):
    file_kind = FileKind.CSV

    def __init__(self, weights: MatchWeights | None = None) -> None:
        self._weights = weights or MatchWeights()

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.parsed is None or context.detected is None:
            raise ValueError("PipelineContext.detected must be set before column mapping")
        context.mapping = auto_map_columns(
            context.parsed.headers, context.detected.type, self._weights
        )
        Log.info(
            f"Mapped columns for document {context.document_id}",
            confidence=context.mapping.confidence,
            label=mapping_confidence_label(context.mapping.confidence),
            auto_apply=context.mapping.should_auto_apply,
        )
        for warning in context.mapping.warnings:
            Log.warning(f"Column mapping: {warning}")
        return context


class PersistTabularStep(PipelineStep):
    file_kind = FileKind.CSV

    def __init__(self, doc_repo: DocumentsRepository, preview_rows: int) -> None:
        self._doc_repo = doc_repo
        self._preview_rows = preview_rows

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.parsed is None or context.detected is None or context.mapping is None:
            raise ValueError("PipelineContext.mapping must be set before persisting")
        context.extracted_data = {
            "headers": list(context.parsed.headers),
            "preview": [dict(row) for row in context.parsed.rows[: self._preview_rows]],
            "detectionConfidence": context.detected.confidence,
            "suggestedMappings": dict(context.mapping.mappings),
            "mappingConfidence": context.mapping.confidence,
            "mappingWarnings": list(context.mapping.warnings),
        }
        self._doc_repo.save_tabular_result(
            context.document_id,
            csv_type=context.detected.type.value,
            extracted_data=context.extracted_data,
            row_count=context.parsed.total_row_count,
        )
        return context


class AutoImportStep(PipelineStep):
    """Imports every row straight away when the mapping passes the auto-apply gate."""

    file_kind = FileKind.CSV

    def __init__(self, importer: RowImporter, doc_repo: DocumentsRepository) -> None:
        self._importer = importer
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.parsed is None or context.detected is None or context.mapping is None:
            raise ValueError("PipelineContext.mapping must be set before import")
        if context.document is None:
            raise ValueError("PipelineContext.document must be set before import")
        if not context.mapping.should_auto_apply:
            Log.info(f"Document {context.document_id} awaits mapping confirmation")
            return context

        outcome = self._importer.import_rows(
            context.document.user_id,
            context.detected.type,
            context.mapping.mappings,
            context.parsed.rows,
        )
        context.import_outcome = outcome
        self._doc_repo.save_import_result(
            context.document_id,
            csv_type=context.detected.type.value,
            column_mappings=context.mapping.mappings,
            outcome=outcome,
        )
        return context


class ExtractPdfStep(PipelineStep):
    file_kind = FileKind.PDF

    def __init__(self, engine: ExtractionEngine) -> None:
        self._engine = engine

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.document is None:
            raise ValueError("PipelineContext.document must be set before extraction")
        outcome = self._engine.extract(context.raw_bytes, filename=context.document.filename)
        context.extraction = outcome.unwrap()
        context.extracted_data = context.extraction.data
        return context


class PersistExtractionStep(PipelineStep):
    file_kind = FileKind.PDF

    def __init__(self, doc_repo: DocumentsRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.extraction is None:
            raise ValueError("PipelineContext.extraction must be set before persisting")
        self._doc_repo.save_extraction_result(context.document_id, context.extracted_data)
        return context


class SummarizeStep(PipelineStep):
    def __init__(self, config: SummaryConfig | None = None) -> None:
        self._config = config or SummaryConfig()

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.source is None:
            raise ValueError("PipelineContext.source must be set before summarizing")
        tabular_type: TabularType | None = None
        row_count: int | None = None
        if context.detected is not None:
            tabular_type = context.detected.type
        if context.parsed is not None:
            row_count = context.parsed.total_row_count

        snapshot = DocumentSnapshot(
            filename=context.source.filename,
            file_kind=context.source.kind,
            extracted_data=context.extracted_data,
            tabular_type=tabular_type,
            row_count=row_count,
        )
        context.summary = generate_smart_summary(snapshot, self._config)
        Log.info(
            f"Summarized document {context.document_id}: {context.summary.title}",
            metrics=len(context.summary.metrics),
            confidence=context.summary.confidence,
        )
        return context

