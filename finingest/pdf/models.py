from dataclasses import dataclass, field


@dataclass(frozen=True)
class PdfText:
    """Embedded text pulled from a PDF without any oracle call."""

    text: str
    page_texts: list[str] = field(default_factory=list)
    processing_time_ms: int = 0

    @property
    def page_count(self) -> int:
        return len(self.page_texts)

    @property
    def char_count(self) -> int:
        return len(self.text.strip())
