"""Validates oracle payloads against the field contract of their schema."""

from collections.abc import Callable
from typing import Any

from finingest.documents.types import PDF_DOCUMENT_TYPES, ExtractionSchema
from finingest.extraction.exceptions import ExtractionSchemaError


def validate_payload(schema: ExtractionSchema, data: Any) -> dict[str, Any]:
    """Check ``data`` against ``schema`` and return it unchanged.

    Nullable values may be null or absent; structural fields must be present
    with the right shape.

    Raises:
        ExtractionSchemaError: on the first violation found.
    """
    if not isinstance(data, dict):
        raise ExtractionSchemaError("Payload must be a JSON object")
    _check_document_type(schema, data.get("documentType"))
    _VALIDATORS[schema](data)
    return data


def _check_document_type(schema: ExtractionSchema, value: Any) -> None:
    allowed = PDF_DOCUMENT_TYPES[schema]
    if value not in allowed:
        raise ExtractionSchemaError(
            f"'documentType' must be one of {sorted(allowed)}, got {value!r}"
        )


def _validate_pl(data: dict[str, Any]) -> None:
    _check_period(data, "period")
    revenue = _require_object(data, "revenue")
    _optional_number(revenue, "total", "revenue")
    for i, item in enumerate(_require_list(revenue, "lineItems", "revenue")):
        _check_line_item(item, f"revenue.lineItems[{i}]")

    expenses = _require_object(data, "expenses")
    _optional_number(expenses, "total", "expenses")
    for i, category in enumerate(_require_list(expenses, "categories", "expenses")):
        path = f"expenses.categories[{i}]"
        if not isinstance(category, dict):
            raise ExtractionSchemaError(f"'{path}' must be an object")
        _require_string(category, "category", path)
        _optional_number(category, "amount", path)
        for j, item in enumerate(category.get("lineItems") or []):
            _check_line_item(item, f"{path}.lineItems[{j}]")

    _optional_number(data, "netIncome", "")
    _check_metadata(data)


def _validate_payroll(data: dict[str, Any]) -> None:
    _check_period(data, "payPeriod")
    for i, employee in enumerate(_require_list(data, "employees", "")):
        path = f"employees[{i}]"
        if not isinstance(employee, dict):
            raise ExtractionSchemaError(f"'{path}' must be an object")
        _require_string(employee, "name", path)
        for key in ("hoursWorked", "grossPay", "taxes", "benefits", "netPay"):
            _optional_number(employee, key, path)

    totals = data.get("totals")
    if totals is not None:
        if not isinstance(totals, dict):
            raise ExtractionSchemaError("'totals' must be an object or null")
        for key in ("totalGrossPay", "totalTaxes", "totalBenefits", "totalNetPay", "employeeCount"):
            _optional_number(totals, key, "totals")
    _check_metadata(data)


def _validate_expense(data: dict[str, Any]) -> None:
    _check_period(data, "period")
    for i, item in enumerate(_require_list(data, "lineItems", "")):
        path = f"lineItems[{i}]"
        if not isinstance(item, dict):
            raise ExtractionSchemaError(f"'{path}' must be an object")
        _require_string(item, "description", path)
        _require_number(item, "amount", path)

    summary = data.get("summary")
    if summary is not None:
        if not isinstance(summary, dict):
            raise ExtractionSchemaError("'summary' must be an object or null")
        _optional_number(summary, "totalExpenses", "summary")
        for i, category in enumerate(summary.get("categories") or []):
            path = f"summary.categories[{i}]"
            if not isinstance(category, dict):
                raise ExtractionSchemaError(f"'{path}' must be an object")
            _require_string(category, "category", path)
            _optional_number(category, "currentPeriod", path)
    _check_metadata(data)


def _validate_generic(data: dict[str, Any]) -> None:
    raw_content = data.get("rawContent")
    if raw_content is not None and not isinstance(raw_content, str):
        raise ExtractionSchemaError("'rawContent' must be a string or null")
    for i, table in enumerate(_require_list(data, "tables", "")):
        if not isinstance(table, list) or not all(isinstance(cell, str) for cell in table):
            raise ExtractionSchemaError(f"'tables[{i}]' must be a list of strings")
    for i, number in enumerate(_require_list(data, "numbers", "")):
        path = f"numbers[{i}]"
        if not isinstance(number, dict):
            raise ExtractionSchemaError(f"'{path}' must be an object")
        _require_string(number, "label", path)
        _require_number(number, "value", path)


_VALIDATORS: dict[ExtractionSchema, Callable[[dict[str, Any]], None]] = {
    ExtractionSchema.PL: _validate_pl,
    ExtractionSchema.PAYROLL: _validate_payroll,
    ExtractionSchema.EXPENSE: _validate_expense,
    ExtractionSchema.GENERIC: _validate_generic,
}


def _qualified(parent: str, key: str) -> str:
    return f"{parent}.{key}" if parent else key


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _require_object(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    if not isinstance(value, dict):
        raise ExtractionSchemaError(f"'{key}' must be an object")
    return value


def _require_list(data: dict[str, Any], key: str, parent: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ExtractionSchemaError(f"'{_qualified(parent, key)}' must be a list")
    return value


def _require_string(data: dict[str, Any], key: str, parent: str) -> None:
    if not isinstance(data.get(key), str):
        raise ExtractionSchemaError(f"'{_qualified(parent, key)}' must be a string")


def _require_number(data: dict[str, Any], key: str, parent: str) -> None:
    if not _is_number(data.get(key)):
        raise ExtractionSchemaError(f"'{_qualified(parent, key)}' must be a number")


def _optional_number(data: dict[str, Any], key: str, parent: str) -> None:
    value = data.get(key)
    if value is not None and not _is_number(value):
        raise ExtractionSchemaError(f"'{_qualified(parent, key)}' must be a number or null")


def _check_line_item(item: Any, path: str) -> None:
    if not isinstance(item, dict):
        raise ExtractionSchemaError(f"'{path}' must be an object")
    _require_string(item, "description", path)
    _require_number(item, "amount", path)


def _check_period(data: dict[str, Any], key: str) -> None:
    period = data.get(key)
    if period is None:
        return
    if not isinstance(period, dict):
        raise ExtractionSchemaError(f"'{key}' must be an object or null")
    for date_key, value in period.items():
        if value is not None and not isinstance(value, str):
            raise ExtractionSchemaError(f"'{key}.{date_key}' must be a string or null")


def _check_metadata(data: dict[str, Any]) -> None:
    metadata = data.get("metadata")
    if metadata is not None and not isinstance(metadata, dict):
        raise ExtractionSchemaError("'metadata' must be an object or null")
