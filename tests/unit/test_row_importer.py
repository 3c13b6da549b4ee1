from unittest.mock import MagicMock

from finingest.documents.exceptions import StoreWriteError
from finingest.documents.record_store import BaseRecordStore
from finingest.documents.row_importer import (
    RowImporter,
    columns_by_field,
    map_employment_type,
)
from finingest.documents.tabular_parser import parse_csv_bytes
from finingest.documents.types import TabularType

ROSTER_MAPPING = {"name": "name", "role": "role"}
PL_MAPPING = {
    "Date": "date",
    "Description": "description",
    "Category": "expense_category",
    "Amount": "expense_amount",
    "Type": "transaction_type",
}


def _make_importer() -> tuple[RowImporter, MagicMock]:
    store = MagicMock(spec=BaseRecordStore)
    return RowImporter(store), store


class TestEmployeeImport:
    def test_skips_row_with_blank_name(self) -> None:
        importer, store = _make_importer()
        rows = [{"name": "John", "role": "Dev"}, {"name": "", "role": "Dev"}]

        outcome = importer.import_rows("user-1", TabularType.EMPLOYEES, ROSTER_MAPPING, rows)

        assert outcome.rows_imported == 1
        assert outcome.rows_skipped == 1
        assert len(outcome.errors) == 1
        assert outcome.errors[0].startswith("Row 2:")
        assert not outcome.success
        store.insert.assert_called_once()

    def test_builds_employee_record(self) -> None:
        importer, store = _make_importer()
        mapping = {
            "Full Name": "name",
            "Title": "role",
            "Dept": "department",
            "Salary": "annual_salary",
            "Status": "employment_type",
            "Notes": "ignore",
        }
        rows = [
            {
                "Full Name": " Jane ",
                "Title": "PM",
                "Dept": "Product",
                "Salary": "$120,000",
                "Status": "Part Time",
                "Notes": "x",
            }
        ]

        outcome = importer.import_rows("user-1", TabularType.EMPLOYEES, mapping, rows)

        assert outcome.success
        table, record = store.insert.call_args.args
        assert table == "employees"
        assert record["user_id"] == "user-1"
        assert record["name"] == "Jane"
        assert record["annual_salary"] == 120000.0
        assert record["annual_benefits"] == 0.0
        assert record["employment_type"] == "part-time"
        assert "Notes" not in record

    def test_store_failure_is_isolated_per_row(self) -> None:
        importer, store = _make_importer()
        store.insert.side_effect = [None, StoreWriteError("duplicate key"), None]
        rows = [{"name": f"E{i}", "role": "Dev"} for i in range(3)]

        outcome = importer.import_rows("user-1", TabularType.EMPLOYEES, ROSTER_MAPPING, rows)

        assert outcome.rows_imported == 2
        assert outcome.rows_skipped == 1
        assert outcome.errors == ["Row 2: duplicate key"]
        assert store.insert.call_count == 3

    def test_counts_always_add_up(self) -> None:
        importer, _store = _make_importer()
        rows = [{"name": "A" if i % 3 else "", "role": "Dev"} for i in range(30)]

        outcome = importer.import_rows("user-1", TabularType.EMPLOYEES, ROSTER_MAPPING, rows)

        assert outcome.rows_imported + outcome.rows_skipped == len(rows)
        assert len(outcome.errors) == RowImporter.MAX_REPORTED_ERRORS

    def test_empty_batch_succeeds(self) -> None:
        importer, store = _make_importer()

        outcome = importer.import_rows("user-1", TabularType.EMPLOYEES, ROSTER_MAPPING, [])

        assert outcome.success
        assert outcome.total_rows_attempted == 0
        store.insert.assert_not_called()


class TestPlImport:
    def test_expense_row(self) -> None:
        importer, store = _make_importer()
        rows = [
            {
                "Date": "2024-01-15",
                "Description": "Office rent",
                "Category": "Rent",
                "Amount": "(2,500.00)",
                "Type": "Expense",
            }
        ]

        outcome = importer.import_rows("user-1", TabularType.PL, PL_MAPPING, rows)

        assert outcome.success
        table, record = store.insert.call_args.args
        assert table == "pl_entries"
        assert record["amount"] == -2500.0
        assert record["entry_type"] == "expense"
        assert record["entry_date"] == "2024-01-15"

    def test_income_row_by_transaction_type(self) -> None:
        importer, store = _make_importer()
        rows = [{"Description": "Sale", "Amount": 100, "Type": "Income"}]

        importer.import_rows("user-1", TabularType.PL, PL_MAPPING, rows)

        _table, record = store.insert.call_args.args
        assert record["entry_type"] == "income"

    def test_category_stands_in_for_description(self) -> None:
        importer, store = _make_importer()
        rows = [{"Category": "Travel", "Amount": 40}]

        importer.import_rows("user-1", TabularType.PL, PL_MAPPING, rows)

        _table, record = store.insert.call_args.args
        assert record["description"] == "Travel"

    def test_missing_amount_is_skipped(self) -> None:
        importer, _store = _make_importer()
        rows = [{"Description": "Mystery"}]

        outcome = importer.import_rows("user-1", TabularType.PL, PL_MAPPING, rows)

        assert outcome.rows_skipped == 1
        assert outcome.errors == ["Row 1: Missing amount"]

    def test_non_numeric_amount_is_skipped(self) -> None:
        importer, _store = _make_importer()
        rows = [{"Description": "Mystery", "Amount": "lots"}]

        outcome = importer.import_rows("user-1", TabularType.PL, PL_MAPPING, rows)

        assert outcome.errors == ["Row 1: Amount is not a number"]


class TestUnsupportedTypes:
    def test_payroll_is_rejected_without_writes(self) -> None:
        importer, store = _make_importer()
        rows = [{"Employee": "A"}, {"Employee": "B"}]

        outcome = importer.import_rows("user-1", TabularType.PAYROLL, {}, rows)

        assert not outcome.success
        assert outcome.rows_imported == 0
        assert outcome.rows_skipped == 2
        assert "not yet supported" in outcome.errors[0]
        store.insert.assert_not_called()

    def test_unknown_is_rejected(self) -> None:
        importer, store = _make_importer()

        outcome = importer.import_rows("user-1", TabularType.UNKNOWN, {}, [{"a": 1}])

        assert outcome.errors == ["Unknown CSV type - cannot import"]
        store.insert.assert_not_called()


class TestHelpers:
    def test_map_employment_type(self) -> None:
        assert map_employment_type("FT") == "full-time"
        assert map_employment_type("Contract") == "contractor"
        assert map_employment_type("part-time hourly") == "part-time"
        assert map_employment_type(None) == "full-time"
        assert map_employment_type("intern") == "full-time"

    def test_columns_by_field_drops_ignored(self) -> None:
        assert columns_by_field({"A": "name", "B": "ignore"}) == {"name": "A"}


class TestImportFromParsedCsv:
    def test_placeholder_cells_and_ids_survive_import(self) -> None:
        importer, store = _make_importer()
        parsed = parse_csv_bytes(b"name,role,employee_id\nNan,Dev,00123\nJohn,N/A,7\n")
        mapping = {"name": "name", "role": "role", "employee_id": "employee_id"}

        outcome = importer.import_rows("user-1", TabularType.EMPLOYEES, mapping, parsed.rows)

        assert outcome.rows_imported == 2
        assert outcome.rows_skipped == 0
        first, second = (c.args[1] for c in store.insert.call_args_list)
        assert first["name"] == "Nan"
        assert first["employee_id"] == "00123"
        assert second["role"] == "N/A"

    def test_numeric_text_is_parsed_on_import(self) -> None:
        importer, store = _make_importer()
        parsed = parse_csv_bytes(b"name,role,annual_salary\nJane,PM,\"120,000\"\n")
        mapping = {"name": "name", "role": "role", "annual_salary": "annual_salary"}

        importer.import_rows("user-1", TabularType.EMPLOYEES, mapping, parsed.rows)

        assert store.insert.call_args.args[1]["annual_salary"] == 120000.0
