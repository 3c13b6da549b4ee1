from abc import ABC, abstractmethod


class BaseExtractionClient(ABC):
    """Contract for provider-specific extraction oracle clients."""

    @abstractmethod
    def complete_with_document(
        self,
        *,
        model: str,
        instruction: str,
        document: bytes,
        filename: str,
        json_schema: dict[str, object],
        schema_name: str,
        timeout_seconds: float | None = None,
    ) -> str:
        """Send a raw PDF with the instruction; return the response text.

        Raises:
            ExtractionTimeoutError: if the call exceeded ``timeout_seconds``.
            ExtractionNetworkError: on transport or provider failures.
            ExtractionError: if the provider returned no usable content.
        """

    @abstractmethod
    def complete_with_text(
        self,
        *,
        model: str,
        instruction: str,
        json_schema: dict[str, object],
        schema_name: str,
        timeout_seconds: float | None = None,
    ) -> str:
        """Send a text-only instruction; return the response text."""
