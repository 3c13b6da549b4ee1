import time

import pymupdf

from finingest.pdf.base import BasePdfExtractor
from finingest.pdf.exceptions import PdfExtractionError
from finingest.pdf.models import PdfText


class PyMuPdfAdapter(BasePdfExtractor):
    """Extracts text from PDF using PyMuPDF."""

    def extract(self, pdf_bytes: bytes) -> PdfText:
        started = time.monotonic()
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text().strip() for page in doc]
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf extraction failed: {exc}") from exc
        return PdfText(
            text="\n".join(pages).strip(),
            page_texts=pages,
            processing_time_ms=int((time.monotonic() - started) * 1000),
        )
