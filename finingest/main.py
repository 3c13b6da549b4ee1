from finingest.config.settings import Settings
from finingest.database.connection import close_pool, init_pool
from finingest.database.repositories.job_repository import JobRepository
from finingest.logging.logger import Log
from finingest.processor.processor import build_processor
from finingest.worker.job_runner import JobRunner
from finingest.worker.worker import Worker


def main() -> None:
    """Entry point: initialize pool -> build dependencies -> start worker loop."""
    settings = Settings()
    Log.configure(settings.log_level)
    Log.info(
        "Starting document worker",
        env=settings.app_env,
        provider=settings.extraction_provider,
        pdf_engine=settings.pdf_engine,
    )
    init_pool(settings)

    try:
        processor = build_processor(settings)
        job_repo = JobRepository(settings.max_job_attempts)
        job_runner = JobRunner(processor, job_repo, settings)
        worker = Worker(job_repo, job_runner, settings)
        worker.run()
    finally:
        close_pool()


if __name__ == "__main__":
    main()
