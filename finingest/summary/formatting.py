import re
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from finingest.summary.models import DateRange

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])([A-Z])")

_DATE_FIELDS = ("date", "pay_date", "payDate", "transaction_date", "transactionDate", "period")


def format_currency(value: float) -> str:
    """``$`` prefix, thousands separators, whole dollars: ``-1234.5`` -> ``-$1,235``."""
    rounded = Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(int(rounded)):,}"


def format_number(value: float) -> str:
    """Thousands separators, at most three decimals, trailing zeros dropped."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def parse_date(value: Any) -> date | None:
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return datetime.strptime(text, "%Y-%m").date()
    except ValueError:
        return None


def format_period_date(value: str | None) -> str:
    """``2024-01-31`` -> ``Jan 2024``; unparseable input is returned unchanged."""
    if not value:
        return ""
    parsed = parse_date(value)
    if parsed is None:
        return value
    return parsed.strftime("%b %Y")


def period_range(period: Any, start_key: str = "startDate", end_key: str = "endDate") -> DateRange | None:
    if not isinstance(period, Mapping):
        return None
    start, end = period.get(start_key), period.get(end_key)
    if not start or not end:
        return None
    return DateRange(start=format_period_date(start), end=format_period_date(end))


def date_range_of(items: Iterable[Any]) -> DateRange | None:
    """Earliest and latest parseable date across the usual date fields of ``items``."""
    dates: list[date] = []
    for item in items:
        if not isinstance(item, Mapping):
            continue
        for key in _DATE_FIELDS:
            parsed = parse_date(item.get(key))
            if parsed is not None:
                dates.append(parsed)
    if not dates:
        return None
    return DateRange(start=min(dates).strftime("%b %Y"), end=max(dates).strftime("%b %Y"))


def humanize_key(key: str) -> str:
    """``netIncome`` -> ``net Income``."""
    return _CAMEL_BOUNDARY_RE.sub(r" \1", key).strip()
