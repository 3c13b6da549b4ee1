from finingest.database.repositories.documents_repository import DocumentsRepository
from finingest.summary.config import SummaryConfig
from finingest.summary.models import SmartSummary
from finingest.summary.smart_summary import generate_smart_summary, generate_suggested_questions


class DocumentSummaryService:
    """Regenerates a stored document's smart summary on demand."""

    def __init__(self, doc_repo: DocumentsRepository, config: SummaryConfig | None = None) -> None:
        self._doc_repo = doc_repo
        self._config = config or SummaryConfig()

    def summarize(self, document_id: int) -> SmartSummary:
        """Raises DocumentNotFoundError if the document does not exist."""
        record = self._doc_repo.find_record(document_id)
        return generate_smart_summary(record.to_snapshot(), self._config)

    def suggested_questions(self, document_id: int) -> list[str]:
        return generate_suggested_questions(self.summarize(document_id))
