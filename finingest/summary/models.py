from dataclasses import dataclass, field
from enum import Enum


class MetricKind(str, Enum):
    CURRENCY = "currency"
    NUMBER = "number"
    PERCENTAGE = "percentage"
    TEXT = "text"
    DATE = "date"


class SummaryType(str, Enum):
    """Document-type tag of a summary; drives titles and follow-up questions."""

    PL = "pl"
    PAYROLL = "payroll"
    EXPENSE = "expense"
    EMPLOYEES = "employees"
    CSV = "csv"
    PDF = "pdf"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class KeyMetric:
    label: str
    value: str
    kind: MetricKind


@dataclass(frozen=True)
class DateRange:
    start: str
    end: str


@dataclass(frozen=True)
class SmartSummary:
    """Headline figures of one processed document. Always derived, never stored."""

    title: str
    document_type: SummaryType
    metrics: list[KeyMetric] = field(default_factory=list)
    item_count: int | None = None
    date_range: DateRange | None = None
    confidence: float = 0.5
