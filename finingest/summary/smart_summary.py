"""Smart summaries: a handful of headline metrics per processed document.

Each document-type branch picks its figures, every figure found raises the
confidence by a fixed step from a per-source base, and the result is capped.
"""

import re
from collections.abc import Mapping, Sequence
from typing import Any

from finingest.documents.models import DocumentSnapshot, Row
from finingest.documents.types import ExtractionSchema, FileKind, TabularType, schema_for_document_type
from finingest.documents.values import parse_numeric
from finingest.summary.config import SummaryConfig
from finingest.summary.formatting import (
    date_range_of,
    format_currency,
    format_number,
    humanize_key,
    period_range,
)
from finingest.summary.models import DateRange, KeyMetric, MetricKind, SmartSummary, SummaryType

_EXTENSION_RE = re.compile(r"\.[^.]+$")
_BARE_DATE_RE = re.compile(r"^\d{4}[-\s]\d{2}([-\s]\d{2})?$")
_SEPARATORS_RE = re.compile(r"[-_]")
_WHITESPACE_RE = re.compile(r"\s+")

_TYPE_TITLES: dict[SummaryType, str] = {
    SummaryType.PL: ExtractionSchema.PL.label,
    SummaryType.PAYROLL: ExtractionSchema.PAYROLL.label,
    SummaryType.EXPENSE: ExtractionSchema.EXPENSE.label,
    SummaryType.EMPLOYEES: "Employee Data",
}

_SALARY_COLUMNS = ("annual_salary", "salary", "annualsalary", "pay", "compensation")
_ROLE_COLUMNS = ("role", "title", "position", "job_title")

_GENERIC_CURRENCY_KEYS = ("total", "amount", "revenue", "expense", "income", "cost", "price", "balance")
_GENERIC_DATE_KEYS = ("date", "period", "month", "year")
_GENERIC_SKIPPED_KEYS = frozenset({"documentType", "lineItems", "numbers", "tables", "rawContent"})

_SUGGESTED_QUESTIONS: dict[SummaryType, tuple[str, str, str]] = {
    SummaryType.PL: (
        "What are my biggest expense categories?",
        "How does this compare to last month?",
        "What's my profit margin?",
    ),
    SummaryType.PAYROLL: (
        "What's my average employee cost?",
        "Show me payroll by department",
        "How has payroll changed over time?",
    ),
    SummaryType.EXPENSE: (
        "Where am I spending the most?",
        "Are there any unusual expenses?",
        "How can I reduce costs?",
    ),
    SummaryType.EMPLOYEES: (
        "What's my total payroll cost?",
        "Show me headcount by department",
        "What are my labor costs?",
    ),
}
_DEFAULT_QUESTIONS = (
    "What insights can you find in this data?",
    "Summarize the key points",
    "Are there any patterns I should know about?",
)


class _Draft:
    """Metrics and confidence collected by one summary branch."""

    def __init__(self, document_type: SummaryType, base_confidence: float, config: SummaryConfig) -> None:
        self.document_type = document_type
        self.metrics: list[KeyMetric] = []
        self.confidence = base_confidence
        self.item_count: int | None = None
        self.date_range: DateRange | None = None
        self._config = config

    def add(self, label: str, value: str, kind: MetricKind, boost: float = 0.0) -> None:
        self.metrics.append(KeyMetric(label=label, value=value, kind=kind))
        self.confidence += boost

    def capped_confidence(self) -> float:
        return min(round(self.confidence, 2), self._config.max_confidence)


def _nested(data: Mapping[str, Any], *keys: str) -> Any:
    value: Any = data
    for key in keys:
        if not isinstance(value, Mapping):
            return None
        value = value.get(key)
    return value


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _summarize_pl(data: Mapping[str, Any], config: SummaryConfig) -> _Draft:
    draft = _Draft(SummaryType.PL, config.pdf_base_confidence, config)

    revenue = parse_numeric(_nested(data, "revenue", "total"))
    if revenue:
        draft.add("Revenue", format_currency(revenue), MetricKind.CURRENCY, config.metric_boost)

    expenses = parse_numeric(_nested(data, "expenses", "total"))
    if expenses:
        draft.add("Expenses", format_currency(expenses), MetricKind.CURRENCY, config.metric_boost)

    net_income = parse_numeric(data.get("netIncome"))
    if net_income:
        draft.add("Net Income", format_currency(net_income), MetricKind.CURRENCY, config.metric_boost)
    elif revenue and expenses:
        # Plain revenue - expenses only holds for positive totals. The prompts ask
        # for negative expenses, so the sign is dropped before subtracting.
        computed = revenue - abs(expenses)
        if computed:
            draft.add("Net Income", format_currency(computed), MetricKind.CURRENCY)

    items = len(_as_list(_nested(data, "revenue", "lineItems"))) + len(
        _as_list(_nested(data, "expenses", "categories"))
    )
    draft.item_count = items or None
    draft.date_range = period_range(data.get("period"))
    return draft


def _summarize_payroll(data: Mapping[str, Any], config: SummaryConfig) -> _Draft:
    draft = _Draft(SummaryType.PAYROLL, config.pdf_base_confidence, config)
    employees = data.get("employees")
    totals = data.get("totals") if isinstance(data.get("totals"), Mapping) else {}

    if isinstance(employees, list):
        draft.add("Employees", format_number(len(employees)), MetricKind.NUMBER, config.metric_boost)
        draft.item_count = len(employees)
    else:
        count = parse_numeric(totals.get("employeeCount"))
        if count is not None:
            draft.add("Employees", format_number(count), MetricKind.NUMBER, config.metric_boost)

    rows = [emp for emp in _as_list(employees) if isinstance(emp, Mapping)]
    total_gross = sum(parse_numeric(emp.get("grossPay")) or 0.0 for emp in rows)
    total_net = sum(parse_numeric(emp.get("netPay")) or 0.0 for emp in rows)
    if total_gross <= 0:
        total_gross = parse_numeric(totals.get("totalGrossPay")) or 0.0
    if total_net <= 0:
        total_net = parse_numeric(totals.get("totalNetPay")) or 0.0

    if total_gross > 0:
        draft.add("Total Gross", format_currency(total_gross), MetricKind.CURRENCY, config.metric_boost)
    if total_net > 0:
        draft.add("Total Net", format_currency(total_net), MetricKind.CURRENCY, config.metric_boost)

    draft.date_range = period_range(data.get("payPeriod"))
    if draft.date_range is not None and draft.date_range.start and draft.date_range.end:
        draft.add(
            "Period",
            f"{draft.date_range.start} - {draft.date_range.end}",
            MetricKind.TEXT,
            config.metadata_boost,
        )
    return draft


def _summarize_expense(data: Mapping[str, Any], config: SummaryConfig) -> _Draft:
    draft = _Draft(SummaryType.EXPENSE, config.pdf_base_confidence, config)
    line_items = [item for item in _as_list(data.get("lineItems")) if isinstance(item, Mapping)]

    summary_total = parse_numeric(_nested(data, "summary", "totalExpenses"))
    if summary_total is not None and summary_total > 0:
        draft.add("Total", format_currency(summary_total), MetricKind.CURRENCY, config.metric_boost * 2)
    elif line_items:
        total = sum(parse_numeric(item.get("amount")) or 0.0 for item in line_items)
        if total > 0:
            draft.add("Total", format_currency(total), MetricKind.CURRENCY, config.metric_boost)

    top = _top_expense_category(data, line_items)
    if top is not None:
        category, amount = top
        draft.add(f"Top: {category}", format_currency(amount), MetricKind.CURRENCY)

    if isinstance(data.get("lineItems"), list):
        draft.item_count = len(data["lineItems"])
    draft.date_range = period_range(data.get("period")) or date_range_of(line_items)
    return draft


def _top_expense_category(
    data: Mapping[str, Any], line_items: Sequence[Mapping[str, Any]]
) -> tuple[str, float] | None:
    categories = [
        (str(c.get("category")), parse_numeric(c.get("currentPeriod")) or 0.0)
        for c in _as_list(_nested(data, "summary", "categories"))
        if isinstance(c, Mapping)
    ]
    if not categories:
        by_category: dict[str, float] = {}
        for item in line_items:
            amount = parse_numeric(item.get("amount"))
            if amount is None:
                continue
            category = str(item.get("category") or "Other")
            by_category[category] = by_category.get(category, 0.0) + amount
        categories = list(by_category.items())
    if not categories:
        return None
    return max(categories, key=lambda pair: pair[1])


def _summarize_generic_pdf(data: Mapping[str, Any], config: SummaryConfig) -> _Draft:
    draft = _Draft(SummaryType.PDF, config.generic_base_confidence, config)

    labeled: list[tuple[str, Any]] = [
        (key, value) for key, value in data.items() if key not in _GENERIC_SKIPPED_KEYS
    ]
    labeled.extend(
        (str(entry.get("label")), entry.get("value"))
        for entry in _as_list(data.get("numbers"))
        if isinstance(entry, Mapping) and entry.get("label")
    )

    for key, value in labeled:
        lower = key.lower()
        number = parse_numeric(value)
        if number is not None and any(word in lower for word in _GENERIC_CURRENCY_KEYS):
            draft.add(humanize_key(key), format_currency(number), MetricKind.CURRENCY, config.metric_boost)
        elif isinstance(value, str) and any(word in lower for word in _GENERIC_DATE_KEYS):
            draft.add(humanize_key(key), value, MetricKind.DATE, config.metadata_boost)
        elif number is not None and abs(number) > config.currency_threshold:
            draft.add(humanize_key(key), format_currency(number), MetricKind.CURRENCY, config.metadata_boost)

    line_items = data.get("lineItems") or data.get("line_items")
    if isinstance(line_items, list):
        draft.item_count = len(line_items)
        draft.date_range = date_range_of(line_items)

    del draft.metrics[config.max_display_metrics :]
    return draft


def _find_column(headers: Sequence[str], candidates: Sequence[str]) -> str | None:
    for header in headers:
        lower = header.lower()
        if any(candidate in lower for candidate in candidates):
            return header
    return None


def _summarize_employees(headers: Sequence[str], rows: Sequence[Row], config: SummaryConfig) -> _Draft:
    draft = _Draft(SummaryType.EMPLOYEES, config.csv_base_confidence, config)
    draft.add("Employees", format_number(len(rows)), MetricKind.NUMBER, config.metric_boost * 2)

    salary_column = _find_column(headers, _SALARY_COLUMNS)
    if salary_column is not None:
        total = sum(parse_numeric(row.get(salary_column)) or 0.0 for row in rows)
        if total > 0:
            draft.add("Total Salaries", format_currency(total), MetricKind.CURRENCY)
            draft.add("Avg Salary", format_currency(total / len(rows)), MetricKind.CURRENCY)
            draft.confidence += config.metric_boost * 2

    role_column = _find_column(headers, _ROLE_COLUMNS)
    if role_column is not None:
        roles = {str(row.get(role_column)) for row in rows if row.get(role_column)}
        draft.add("Roles", format_number(len(roles)), MetricKind.NUMBER)

    draft.item_count = len(rows)
    return draft


def _summarize_generic_csv(
    headers: Sequence[str],
    rows: Sequence[Row],
    tabular_type: TabularType | None,
    config: SummaryConfig,
) -> _Draft:
    document_type = {
        TabularType.PL: SummaryType.PL,
        TabularType.PAYROLL: SummaryType.PAYROLL,
    }.get(tabular_type, SummaryType.CSV)
    draft = _Draft(document_type, config.generic_base_confidence, config)
    draft.add("Rows", format_number(len(rows)), MetricKind.NUMBER)
    draft.add("Columns", format_number(len(headers)), MetricKind.NUMBER)

    sample = rows[: config.numeric_column_sample_size]
    best: tuple[str, float] | None = None
    for header in headers:
        values = [parse_numeric(row.get(header)) for row in sample]
        numbers = [value for value in values if value is not None]
        if len(numbers) <= len(rows) * config.numeric_column_threshold:
            continue
        total = sum(numbers)
        if best is None or total > best[1]:
            best = (header, total)

    if best is not None and best[1] > config.currency_threshold:
        draft.add(f"Total {best[0]}", format_currency(best[1]), MetricKind.CURRENCY, config.metric_boost * 2)

    draft.item_count = len(rows)
    return draft


def generate_title(filename: str, document_type: SummaryType) -> str:
    """Readable title from the filename, or the type's label when the name says nothing."""
    stem = _EXTENSION_RE.sub("", filename)
    cleaned = _WHITESPACE_RE.sub(" ", _SEPARATORS_RE.sub(" ", stem)).strip()

    if len(cleaned) < 3 or _BARE_DATE_RE.match(cleaned):
        return _TYPE_TITLES.get(document_type) or cleaned or "Document"
    return " ".join(word[:1].upper() + word[1:].lower() for word in cleaned.split(" "))


def generate_smart_summary(
    snapshot: DocumentSnapshot, config: SummaryConfig = SummaryConfig()
) -> SmartSummary:
    """Summarize a processed document from its stored extraction payload."""
    data = snapshot.extracted_data or {}

    if snapshot.file_kind is FileKind.PDF:
        schema = schema_for_document_type(data.get("documentType"))
        if schema is ExtractionSchema.PL:
            draft = _summarize_pl(data, config)
        elif schema is ExtractionSchema.PAYROLL:
            draft = _summarize_payroll(data, config)
        elif schema is ExtractionSchema.EXPENSE:
            draft = _summarize_expense(data, config)
        else:
            draft = _summarize_generic_pdf(data, config)
    else:
        headers = [str(header) for header in snapshot.headers]
        rows = [row for row in snapshot.preview if isinstance(row, Mapping)]
        if snapshot.tabular_type is TabularType.EMPLOYEES:
            draft = _summarize_employees(headers, rows, config)
        else:
            draft = _summarize_generic_csv(headers, rows, snapshot.tabular_type, config)
        if snapshot.row_count:
            draft.item_count = snapshot.row_count

    return SmartSummary(
        title=generate_title(snapshot.filename, draft.document_type),
        document_type=draft.document_type,
        metrics=draft.metrics,
        item_count=draft.item_count,
        date_range=draft.date_range,
        confidence=draft.capped_confidence(),
    )


def generate_suggested_questions(summary: SmartSummary) -> list[str]:
    """Three canned follow-up questions for the summary's document type."""
    return list(_SUGGESTED_QUESTIONS.get(summary.document_type, _DEFAULT_QUESTIONS))
