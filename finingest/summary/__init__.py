from finingest.summary.config import SummaryConfig
from finingest.summary.models import DateRange, KeyMetric, MetricKind, SmartSummary, SummaryType
from finingest.summary.smart_summary import generate_smart_summary, generate_suggested_questions

__all__ = [
    "DateRange",
    "KeyMetric",
    "MetricKind",
    "SmartSummary",
    "SummaryConfig",
    "SummaryType",
    "generate_smart_summary",
    "generate_suggested_questions",
]
