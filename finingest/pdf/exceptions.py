class PdfExtractionError(Exception):
    """Raised when local PDF text extraction fails."""
