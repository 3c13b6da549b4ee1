from pathlib import Path

from finingest.config.settings import Settings
from finingest.database.record_store import PostgresRecordStore
from finingest.database.repositories.documents_repository import DocumentsRepository
from finingest.database.repositories.job_repository import JobRepository
from finingest.documents.record_store import BaseRecordStore
from finingest.documents.row_importer import RowImporter
from finingest.documents.scoring import MatchWeights
from finingest.extraction.factory import ExtractionEngineFactory
from finingest.logging.logger import Log
from finingest.processor.file_loader import FileLoader
from finingest.processor.pipeline import PipelineContext, PipelineStep
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


class Processor:
    """Runs the processing steps for one document.

    CSV: validate -> parse -> detect -> map -> persist -> auto-import -> summarize.
    PDF: validate -> extract -> persist -> summarize.
    Any failure runs the failure step and is re-raised to the job runner.
    """

    def __init__(self, steps: list[PipelineStep], failed_step: PipelineStep) -> None:
        self._steps = steps
        self._failed_step = failed_step

    def process(self, document_id: int, job_id: int) -> PipelineContext:
        Log.info(f"Processing document {document_id} for job {job_id}")
        context = PipelineContext(document_id=document_id, job_id=job_id)
        try:
            for step in self._steps:
                if step.applies_to(context):
                    context = step.run(context)
        except Exception as exc:
            context.error = exc
            context.error_message = str(exc)
            self._failed_step.run(context)
            raise
        kind = context.file_kind.value if context.file_kind is not None else None
        Log.info(f"Document {document_id} processed", kind=kind)
        return context


def build_processor(
    settings: Settings,
    files_root: Path | None = None,
    store: BaseRecordStore | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    file_loader = FileLoader(files_root=files_root or Path(settings.files_root))
    doc_repo = DocumentsRepository()
    job_repo = JobRepository(settings.max_job_attempts)
    importer = RowImporter(store or PostgresRecordStore())
    engine = ExtractionEngineFactory.create(settings)
    weights = MatchWeights(auto_apply_threshold=settings.auto_apply_threshold)

    steps: list[PipelineStep] = [
        MarkProcessingStep(job_repo, doc_repo),
        LoadDocumentStep(file_loader=file_loader, doc_repo=doc_repo),
        ValidateUploadStep(settings.max_upload_bytes),
        ParseTabularStep(),
        DetectTypeStep(),
        AutoMapStep(weights),
        PersistTabularStep(doc_repo, preview_rows=settings.csv_preview_rows),
        AutoImportStep(importer, doc_repo),
        ExtractPdfStep(engine),
        PersistExtractionStep(doc_repo),
        SummarizeStep(),
    ]
    return Processor(steps=steps, failed_step=MarkDocumentErrorStep(doc_repo))
