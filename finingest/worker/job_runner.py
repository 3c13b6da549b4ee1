from finingest.config.settings import Settings
from finingest.database.models import JobRecord
from finingest.database.repositories.job_repository import JobRepository
from finingest.documents.exceptions import TabularParseError, UploadValidationError
from finingest.logging.logger import Log
from finingest.processor.exceptions import DocumentNotFoundError
from finingest.processor.processor import Processor

# Re-running the same document cannot change the outcome of these.
PERMANENT_ERRORS: tuple[type[Exception], ...] = (
    UploadValidationError,
    TabularParseError,
    DocumentNotFoundError,
)


class JobRunner:
    """Runs one document job and applies the retry budget on failure."""

    def __init__(
        self,
        processor: Processor,
        job_repo: JobRepository,
        settings: Settings,
    ) -> None:
        self._processor = processor
        self._job_repo = job_repo
        self._settings = settings

    def run(self, job: JobRecord) -> None:
        attempt = job.attempts + 1
        Log.info(f"Running job {job.id} for document {job.document_id}", attempt=attempt)
        try:
            self._processor.process(job.document_id, job.id)
        except Exception as exc:
            self._handle_failure(job, exc)
            return
        self._job_repo.mark_done(job.id)
        Log.info(f"Job {job.id} done")

    def _handle_failure(self, job: JobRecord, exc: Exception) -> None:
        """Fail permanently on non-retryable errors or an exhausted budget, else requeue."""
        attempt = job.attempts + 1
        Log.error(f"Job {job.id} failed: {exc}", error_type=type(exc).__name__, attempt=attempt)
        if isinstance(exc, PERMANENT_ERRORS) or attempt >= self._settings.max_job_attempts:
            self._job_repo.mark_failed(job.id, str(exc))
            Log.error(f"Job {job.id} permanently failed", attempts=attempt)
            return
        self._job_repo.increment_attempts(job.id)
        Log.warning(f"Job {job.id} requeued", next_attempt=attempt + 1)
