from abc import ABC, abstractmethod

from finingest.pdf.models import PdfText


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters."""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> PdfText:
        """Extract embedded text from PDF bytes.

        Scanned, image-only pages yield empty page text rather than an error.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            PdfText with the joined, stripped text and per-page text.

        Raises:
            PdfExtractionError: if the bytes cannot be read as a PDF.
        """
