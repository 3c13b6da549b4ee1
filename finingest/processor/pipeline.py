from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar

from finingest.documents.models import (
    AutoMappingResult,
    DetectedType,
    ImportOutcome,
    SourceFile,
    TabularParseResult,
)
from finingest.documents.types import FileKind
from finingest.extraction.models import ExtractionResult
from finingest.processor.models import UploadedDocument
from finingest.summary.models import SmartSummary


@dataclass(slots=True)
class PipelineContext:
    document_id: int
    job_id: int
    document: UploadedDocument | None = None
    raw_bytes: bytes = b""
    source: SourceFile | None = None
    parsed: TabularParseResult | None = None
    detected: DetectedType | None = None
    mapping: AutoMappingResult | None = None
    import_outcome: ImportOutcome | None = None
    extraction: ExtractionResult | None = None
    extracted_data: dict[str, Any] = field(default_factory=dict)
    summary: SmartSummary | None = None
    error: BaseException | None = None
    error_message: str = ""

    @property
    def file_kind(self) -> FileKind | None:
        return self.source.kind if self.source is not None else None


class PipelineStep(ABC):
    # steps bound to one file kind are skipped for the other
    file_kind: ClassVar[FileKind | None] = None

    def applies_to(self, context: PipelineContext) -> bool:
        return self.file_kind is None or context.file_kind is self.file_kind

    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
