class ExtractionError(Exception):
    """Raised when structured extraction from a document fails."""


class ExtractionNetworkError(ExtractionError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""


class ExtractionSchemaError(ExtractionError):
    """Raised when the oracle output does not satisfy the requested field contract."""


class ExtractionTimeoutError(ExtractionError):
    """Raised when the oracle call is cancelled by its wall-clock timeout."""

    def __init__(self, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"PDF processing timed out after {timeout_seconds:g} seconds. "
            "Complex documents may require alternative processing methods."
        )


class CombinedExtractionError(ExtractionError):
    """Raised when a primary attempt and its single fallback both failed."""

    def __init__(self, causes: list[str]) -> None:
        self.causes = causes
        super().__init__("PDF processing failed: " + ", and ".join(causes))
