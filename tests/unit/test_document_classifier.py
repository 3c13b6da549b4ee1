import pytest

from finingest.documents.document_classifier import classify_filename
from finingest.documents.types import ExtractionSchema


class TestClassifyFilename:
    @pytest.mark.parametrize(
        ("filename", "expected"),
        [
            ("Q1_P&L_2024.pdf", ExtractionSchema.PL),
            ("profit-and-loss.pdf", ExtractionSchema.PL),
            ("income_statement_march.pdf", ExtractionSchema.PL),
            ("payroll_jan.pdf", ExtractionSchema.PAYROLL),
            ("Salary Summary.PDF", ExtractionSchema.PAYROLL),
            ("expense_report.pdf", ExtractionSchema.EXPENSE),
            ("RECEIPT-0042.pdf", ExtractionSchema.EXPENSE),
            ("scan_0001.pdf", ExtractionSchema.GENERIC),
        ],
    )
    def test_classifies_by_keyword(self, filename: str, expected: ExtractionSchema) -> None:
        assert classify_filename(filename) is expected

    def test_pl_checked_before_payroll(self) -> None:
        assert classify_filename("profit_payroll.pdf") is ExtractionSchema.PL

    def test_none_is_generic(self) -> None:
        assert classify_filename(None) is ExtractionSchema.GENERIC

    def test_empty_is_generic(self) -> None:
        assert classify_filename("") is ExtractionSchema.GENERIC
