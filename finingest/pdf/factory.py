from typing import ClassVar

from finingest.config.settings import Settings
from finingest.pdf.base import BasePdfExtractor
from finingest.pdf.pdfplumber_adapter import PdfPlumberAdapter
from finingest.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfExtractorFactory:
    """Creates the local text extractor used by the text-first strategy."""

    ADAPTERS: ClassVar[dict[str, type[BasePdfExtractor]]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()
