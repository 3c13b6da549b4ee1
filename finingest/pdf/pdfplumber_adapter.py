import io
import time

import pdfplumber

from finingest.pdf.base import BasePdfExtractor
from finingest.pdf.exceptions import PdfExtractionError
from finingest.pdf.models import PdfText


class PdfPlumberAdapter(BasePdfExtractor):
    """Extracts text from PDF using pdfplumber."""

    def extract(self, pdf_bytes: bytes) -> PdfText:
        started = time.monotonic()
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [(page.extract_text() or "").strip() for page in pdf.pages]
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber extraction failed: {exc}") from exc
        return PdfText(
            text="\n".join(pages).strip(),
            page_texts=pages,
            processing_time_ms=int((time.monotonic() - started) * 1000),
        )
