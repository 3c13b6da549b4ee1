from typing import ClassVar

from finingest.config.settings import Settings
from finingest.extraction.client_base import BaseExtractionClient
from finingest.extraction.engine import ExtractionEngine
from finingest.extraction.example_client_adapter import ExampleClientAdapter
from finingest.extraction.openai_client_adapter import OpenAIClientAdapter
from finingest.pdf.factory import PdfExtractorFactory


class ExtractionEngineFactory:
    """Creates the extraction engine wired to the configured oracle provider."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> ExtractionEngine:
        """Create a configured extraction engine from application settings."""
        provider = settings.extraction_provider.lower()
        vision_model, text_model = cls._resolve_models(provider, settings)
        return ExtractionEngine(
            client=cls._create_client(provider, settings),
            pdf_extractor=PdfExtractorFactory.create(settings),
            vision_model=vision_model,
            text_model=text_model,
            vision_timeout_seconds=settings.vision_timeout_seconds,
            text_first_max_bytes=settings.text_first_max_bytes,
            min_text_chars=settings.min_text_chars,
        )

    @classmethod
    def _create_client(cls, provider: str, settings: Settings) -> BaseExtractionClient:
        if provider == "example":
            return ExampleClientAdapter()
        return OpenAIClientAdapter(
            api_key=cls._resolve_api_key(provider, settings),
            timeout_seconds=cls._resolve_timeout_seconds(provider, settings),
            base_url=cls._resolve_base_url(provider, settings),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = (settings.extraction_openai_compatible_base_url or "").strip()
            if not url:
                raise ValueError(
                    "extraction_openai_compatible_base_url is required for "
                    "extraction_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown extraction provider '{provider}'. Choose from: {supported}"
        )

    @classmethod
    def _resolve_api_key(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.extraction_openai_api_key,
            "openai_compatible": settings.extraction_openai_compatible_api_key,
            "openrouter": settings.extraction_openrouter_api_key,
            "groq": settings.extraction_groq_api_key,
            "together": settings.extraction_together_api_key,
            # ollama ignores the key but the SDK refuses an empty one
            "ollama": settings.extraction_ollama_api_key or "ollama",
        }
        return key_map.get(provider, "") or ""

    @classmethod
    def _resolve_models(cls, provider: str, settings: Settings) -> tuple[str, str]:
        if provider == "example":
            return "example", "example"
        model_map = {
            "openai": (
                settings.extraction_openai_vision_model,
                settings.extraction_openai_text_model,
            ),
            "openai_compatible": (
                settings.extraction_openai_compatible_vision_model,
                settings.extraction_openai_compatible_text_model,
            ),
            "openrouter": (
                settings.extraction_openrouter_vision_model,
                settings.extraction_openrouter_text_model,
            ),
            "groq": (
                settings.extraction_groq_vision_model,
                settings.extraction_groq_text_model,
            ),
            "together": (
                settings.extraction_together_vision_model,
                settings.extraction_together_text_model,
            ),
            "ollama": (
                settings.extraction_ollama_vision_model,
                settings.extraction_ollama_text_model,
            ),
        }
        vision_model, text_model = model_map.get(provider, ("", ""))
        # a provider configured with one model uses it for both strategies
        return vision_model or text_model, text_model or vision_model

    @classmethod
    def _resolve_timeout_seconds(cls, provider: str, settings: Settings) -> int:
        if provider == "openai":
            return settings.extraction_openai_timeout_seconds
        return settings.extraction_openai_compatible_timeout_seconds
