"""Imports mapped spreadsheet rows into typed target tables.

Rows are validated and written one at a time. A row that fails validation or
whose write is rejected is skipped with a ``Row N: <reason>`` error and the
batch carries on; writes already made stay committed.
"""

from collections.abc import Callable, Mapping, Sequence
from typing import Any, ClassVar

from finingest.documents.exceptions import StoreWriteError
from finingest.documents.models import ImportOutcome, Row
from finingest.documents.record_store import BaseRecordStore
from finingest.documents.types import IGNORE_FIELD, TabularType
from finingest.documents.values import as_text, is_blank, parse_numeric
from finingest.logging.logger import Log


class RowValidationError(ValueError):
    """A row is missing required data; carries the user-facing reason."""


_EMPLOYMENT_TYPE_SYNONYMS: dict[str, str] = {
    "fulltime": "full-time",
    "ft": "full-time",
    "full": "full-time",
    "permanent": "full-time",
    "salaried": "full-time",
    "parttime": "part-time",
    "pt": "part-time",
    "part": "part-time",
    "contractor": "contractor",
    "contract": "contractor",
    "freelance": "contractor",
    "freelancer": "contractor",
    "consultant": "contractor",
}


def map_employment_type(value: Any) -> str:
    """Normalize free-text employment status to full-time, part-time or contractor."""
    text = as_text(value)
    if text is None:
        return "full-time"
    key = "".join(ch for ch in text.lower() if ch.isalpha())
    if key in _EMPLOYMENT_TYPE_SYNONYMS:
        return _EMPLOYMENT_TYPE_SYNONYMS[key]
    if "part" in key:
        return "part-time"
    if "contract" in key:
        return "contractor"
    return "full-time"


def columns_by_field(mappings: Mapping[str, str]) -> dict[str, str]:
    """Invert a header -> field mapping, dropping ignored headers."""
    return {field: header for header, field in mappings.items() if field != IGNORE_FIELD}


class _MappedRow:
    """Read access to a raw row through the canonical field names."""

    def __init__(self, row: Row, columns: Mapping[str, str]) -> None:
        self._row = row
        self._columns = columns

    def get(self, field: str) -> Any:
        header = self._columns.get(field)
        if header is None:
            return None
        value = self._row.get(header)
        return None if is_blank(value) else value


class RowImporter:
    """Writes mapped rows to the record store with per-row failure isolation."""

    MAX_REPORTED_ERRORS: ClassVar[int] = 10

    EMPLOYEES_TABLE: ClassVar[str] = "employees"
    PL_TABLE: ClassVar[str] = "pl_entries"

    def __init__(self, store: BaseRecordStore) -> None:
        self._store = store
        self._builders: dict[TabularType, tuple[str, Callable[[str, _MappedRow], dict[str, Any]]]] = {
            TabularType.EMPLOYEES: (self.EMPLOYEES_TABLE, self._build_employee),
            TabularType.PL: (self.PL_TABLE, self._build_pl_entry),
        }

    def import_rows(
        self,
        owner_id: str,
        tabular_type: TabularType,
        mappings: Mapping[str, str],
        rows: Sequence[Row],
    ) -> ImportOutcome:
        """Import every row for ``owner_id``.

        Unknown and not-yet-supported types are rejected up front with a single
        error and nothing is written.
        """
        unsupported = self._unsupported_reason(tabular_type)
        if unsupported is not None:
            Log.warning(
                "Import rejected", type=tabular_type.value, rows=len(rows), reason=unsupported
            )
            return ImportOutcome(
                success=False,
                rows_imported=0,
                rows_skipped=len(rows),
                errors=[unsupported],
            )

        table, build = self._builders[tabular_type]
        columns = columns_by_field(mappings)
        errors: list[str] = []
        imported = 0

        for index, raw in enumerate(rows, start=1):
            try:
                record = build(owner_id, _MappedRow(raw, columns))
                self._store.insert(table, record)
            except RowValidationError as exc:
                errors.append(f"Row {index}: {exc}")
                continue
            except StoreWriteError as exc:
                Log.warning("Row write rejected", table=table, row=index, error=exc)
                errors.append(f"Row {index}: {exc}")
                continue
            imported += 1

        skipped = len(rows) - imported
        Log.info(
            "Rows imported",
            type=tabular_type.value,
            imported=imported,
            skipped=skipped,
            errors=len(errors),
        )
        return ImportOutcome(
            success=not errors,
            rows_imported=imported,
            rows_skipped=skipped,
            errors=errors[: self.MAX_REPORTED_ERRORS],
        )

    def _unsupported_reason(self, tabular_type: TabularType) -> str | None:
        if tabular_type is TabularType.PAYROLL:
            return "Payroll import is not yet supported. This feature is coming soon."
        if tabular_type not in self._builders:
            return "Unknown CSV type - cannot import"
        return None

    @staticmethod
    def _build_employee(owner_id: str, row: _MappedRow) -> dict[str, Any]:
        name = as_text(row.get("name"))
        role = as_text(row.get("role"))
        if name is None or role is None:
            raise RowValidationError("Missing required field (name or role)")

        return {
            "user_id": owner_id,
            "name": name,
            "role": role,
            "department": as_text(row.get("department")),
            "annual_salary": parse_numeric(row.get("annual_salary")) or 0.0,
            "annual_benefits": parse_numeric(row.get("annual_benefits")) or 0.0,
            "employment_type": map_employment_type(row.get("employment_type")),
            "employee_id": as_text(row.get("employee_id")),
        }

    @staticmethod
    def _build_pl_entry(owner_id: str, row: _MappedRow) -> dict[str, Any]:
        description = as_text(row.get("description"))
        category = as_text(row.get("expense_category"))
        if description is None and category is None:
            raise RowValidationError("Missing description or category")

        amount = row.get("expense_amount")
        revenue = row.get("revenue")
        if amount is None and revenue is None:
            raise RowValidationError("Missing amount")

        value = parse_numeric(amount if amount is not None else revenue)
        if value is None:
            raise RowValidationError("Amount is not a number")

        transaction_type = (as_text(row.get("transaction_type")) or "").lower()
        is_income = (
            "income" in transaction_type
            or "revenue" in transaction_type
            or transaction_type == "credit"
            or revenue is not None
        )

        return {
            "user_id": owner_id,
            "entry_date": as_text(row.get("date")),
            "description": description or category,
            "category": category or "",
            "amount": value,
            "entry_type": "income" if is_income else "expense",
        }
