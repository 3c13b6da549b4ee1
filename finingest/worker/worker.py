import time

import psycopg

from finingest.config.settings import Settings
from finingest.database.connection import get_connection
from finingest.database.models import JobRecord
from finingest.database.repositories.job_repository import JobRepository
from finingest.logging.logger import Log
from finingest.worker.job_runner import JobRunner


class Worker:
    """Poll loop: claim -> dispatch, sleeping while the queue is empty."""

    def __init__(
        self,
        job_repo: JobRepository,
        job_runner: JobRunner,
        settings: Settings,
    ) -> None:
        self._job_repo = job_repo
        self._job_runner = job_runner
        self._settings = settings

    def run(self, max_jobs: int | None = None) -> None:
        """Main poll loop. Runs until interrupted.

        If max_jobs is set, stop after processing that many jobs.
        """
        Log.info("Worker started, polling for document jobs")
        jobs_done = 0
        try:
            while max_jobs is None or jobs_done < max_jobs:
                job = self._try_claim_job()
                if job is None:
                    Log.debug("No jobs available, sleeping")
                    time.sleep(self._settings.job_poll_interval_seconds)
                    continue
                self._job_runner.run(job)
                jobs_done += 1
        except KeyboardInterrupt:
            Log.info("Worker shutting down gracefully")

    def _try_claim_job(self) -> JobRecord | None:
        """Attempt to claim the next pending job; database errors are retried on the next poll."""
        try:
            with get_connection() as conn:
                return self._job_repo.claim_next_job(conn)
        except (psycopg.Error, RuntimeError) as exc:
            Log.warning(f"Database error, will retry: {exc}")
            return None
