from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "finingest"
    db_username: str = "finingest"
    db_password: str = "secret"

    max_job_attempts: int = 3
    job_poll_interval_seconds: int = 5

    files_root: str = "/app/files"

    # Upload constraints
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    csv_preview_rows: int = 100

    # Column mapping
    auto_apply_threshold: float = Field(default=0.8, ge=0.0, le=1.0)

    # PDF extraction strategy
    pdf_engine: str = "pdfplumber"
    text_first_max_bytes: int = 100 * 1024
    min_text_chars: int = 100
    vision_timeout_seconds: float = Field(default=90.0, gt=0)

    # Extraction oracle
    extraction_provider: str = "openai"

    extraction_openai_api_key: str = ""
    extraction_openai_vision_model: str = "gpt-5.2"
    extraction_openai_text_model: str = "gpt-4o"
    extraction_openai_timeout_seconds: int = 120

    extraction_openai_compatible_api_key: str = ""
    extraction_openai_compatible_base_url: str = ""
    extraction_openai_compatible_vision_model: str = ""
    extraction_openai_compatible_text_model: str = ""
    extraction_openai_compatible_timeout_seconds: int = 120

    extraction_openrouter_api_key: str = ""
    extraction_openrouter_vision_model: str = ""
    extraction_openrouter_text_model: str = ""

    extraction_groq_api_key: str = ""
    extraction_groq_vision_model: str = ""
    extraction_groq_text_model: str = ""

    extraction_together_api_key: str = ""
    extraction_together_vision_model: str = ""
    extraction_together_text_model: str = ""

    extraction_ollama_api_key: str = ""
    extraction_ollama_vision_model: str = ""
    extraction_ollama_text_model: str = ""
