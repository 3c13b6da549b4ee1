"""Closed document-type enumerations with their vocabularies attached.

Each tabular type carries its own profile (label, target-field vocabulary,
required fields, column synonyms and detection patterns) so the tables cannot
drift apart from one another.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

IGNORE_FIELD = "ignore"


class FileKind(str, Enum):
    """Media kind of an uploaded source file."""

    CSV = "csv"
    PDF = "pdf"


@dataclass(frozen=True)
class TabularProfile:
    """Static description of one tabular document type."""

    label: str
    target_fields: tuple[str, ...] = ()
    required_fields: tuple[str, ...] = ()
    synonyms: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    patterns: tuple[re.Pattern[str], ...] = ()
    unique_patterns: tuple[re.Pattern[str], ...] = ()

    @property
    def vocabulary(self) -> tuple[str, ...]:
        """Target fields plus the ``ignore`` sentinel."""
        return (*self.target_fields, IGNORE_FIELD)


def _compile(*patterns: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


_PL_PROFILE = TabularProfile(
    label="Profit & Loss Statement",
    target_fields=(
        "revenue",
        "expense_category",
        "expense_amount",
        "date",
        "description",
        "transaction_type",
    ),
    required_fields=("description", "expense_amount"),
    synonyms={
        "revenue": ("revenue", "income", "sales", "total_income", "total_revenue"),
        "expense_category": (
            "category",
            "expense_category",
            "account",
            "account_name",
            "expense_type",
            "cost_center",
        ),
        "expense_amount": (
            "amount",
            "expense_amount",
            "value",
            "total",
            "cost",
            "expense",
            "debit",
            "credit",
        ),
        "date": ("date", "transaction_date", "period", "month", "year", "posting_date"),
        "description": (
            "description",
            "memo",
            "notes",
            "details",
            "line_item",
            "item",
            "name",
        ),
        "transaction_type": (
            "type",
            "transaction_type",
            "entry_type",
            "income_expense",
            "dr_cr",
        ),
    },
    patterns=_compile(
        r"revenue",
        r"income",
        r"sales",
        r"expense",
        r"cost",
        r"spending",
        r"net\s?(income|profit)",
        r"total",
        r"gross",
        r"margin",
        r"operating",
        r"overhead",
    ),
    unique_patterns=_compile(
        r"revenue",
        r"expense",
        r"net\s?(income|profit)",
        r"ebitda",
        r"gross\s?margin",
        r"operating\s?(income|expense)",
    ),
)

_PAYROLL_PROFILE = TabularProfile(
    label="Payroll Report",
    target_fields=(
        "employee_name",
        "employee_id",
        "hours_worked",
        "hourly_rate",
        "gross_pay",
        "net_pay",
        "pay_date",
    ),
    required_fields=("employee_name", "gross_pay"),
    synonyms={
        "employee_name": (
            "name",
            "employee_name",
            "employee",
            "full_name",
            "staff_name",
            "worker",
        ),
        "employee_id": (
            "id",
            "employee_id",
            "emp_id",
            "staff_id",
            "employee_number",
            "emp_no",
        ),
        "hours_worked": ("hours", "hours_worked", "total_hours", "work_hours", "regular_hours"),
        "hourly_rate": ("rate", "hourly_rate", "pay_rate", "hour_rate"),
        "gross_pay": (
            "gross",
            "gross_pay",
            "gross_wages",
            "gross_earnings",
            "total_pay",
            "total_earnings",
        ),
        "net_pay": ("net", "net_pay", "net_wages", "take_home", "net_earnings"),
        "pay_date": ("date", "pay_date", "payment_date", "check_date", "period_end"),
    },
    patterns=_compile(
        r"employee",
        r"name",
        r"staff",
        r"hours",
        r"rate",
        r"wage",
        r"gross",
        r"net",
        r"pay",
        r"deduction",
        r"tax",
        r"period",
        r"check",
        r"deposit",
    ),
    unique_patterns=_compile(
        r"hours\s?(worked)?",
        r"hourly\s?rate",
        r"gross\s?pay",
        r"net\s?pay",
        r"deduction",
        r"withholding",
        r"overtime",
        r"pay\s?(period|date)",
    ),
)

_EMPLOYEES_PROFILE = TabularProfile(
    label="Employee Roster",
    target_fields=(
        "name",
        "employee_id",
        "role",
        "department",
        "annual_salary",
        "annual_benefits",
        "employment_type",
    ),
    required_fields=("name", "role"),
    synonyms={
        "name": (
            "name",
            "full_name",
            "employee_name",
            "employee",
            "staff_name",
            "first_last",
        ),
        "employee_id": ("id", "employee_id", "emp_id", "staff_id", "employee_number"),
        "role": ("role", "title", "job_title", "position", "job", "designation"),
        "department": ("department", "dept", "team", "division", "group", "unit"),
        "annual_salary": (
            "salary",
            "annual_salary",
            "yearly_salary",
            "base_salary",
            "compensation",
        ),
        "annual_benefits": ("benefits", "annual_benefits", "total_benefits", "benefit_cost"),
        "employment_type": (
            "type",
            "employment_type",
            "emp_type",
            "status",
            "full_part_time",
            "ft_pt",
        ),
    },
    patterns=_compile(
        r"employee",
        r"name",
        r"staff",
        r"role",
        r"title",
        r"position",
        r"department",
        r"team",
        r"salary",
        r"compensation",
        r"benefits",
        r"hire",
        r"start",
        r"email",
        r"phone",
    ),
    unique_patterns=_compile(
        r"annual\s?salary",
        r"annual\s?benefits",
        r"employment\s?type",
        r"hire\s?date",
        r"department",
        r"job\s?title",
        r"start\s?date",
    ),
)

_UNKNOWN_PROFILE = TabularProfile(label="Unknown Format")


class TabularType(str, Enum):
    """Semantic kind of an uploaded spreadsheet.

    Member order is the detection tie-break priority.
    """

    profile: TabularProfile

    def __new__(cls, tag: str, profile: TabularProfile) -> TabularType:
        obj = str.__new__(cls, tag)
        obj._value_ = tag
        obj.profile = profile
        return obj

    PL = ("pl", _PL_PROFILE)
    PAYROLL = ("payroll", _PAYROLL_PROFILE)
    EMPLOYEES = ("employees", _EMPLOYEES_PROFILE)
    UNKNOWN = ("unknown", _UNKNOWN_PROFILE)

    @property
    def label(self) -> str:
        return self.profile.label


class ExtractionSchema(str, Enum):
    """Field-shape contract requested from the extraction oracle."""

    PL = "pl"
    PAYROLL = "payroll"
    EXPENSE = "expense"
    GENERIC = "generic"

    @property
    def label(self) -> str:
        return _SCHEMA_LABELS[self]


_SCHEMA_LABELS: dict[ExtractionSchema, str] = {
    ExtractionSchema.PL: "P&L Statement",
    ExtractionSchema.PAYROLL: "Payroll Report",
    ExtractionSchema.EXPENSE: "Expense Report",
    ExtractionSchema.GENERIC: "Document",
}

# documentType values the oracle may return, grouped per schema
PDF_DOCUMENT_TYPES: dict[ExtractionSchema, frozenset[str]] = {
    ExtractionSchema.PL: frozenset({"pl", "income_statement", "profit_loss"}),
    ExtractionSchema.PAYROLL: frozenset({"payroll", "payroll_summary", "payroll_report"}),
    ExtractionSchema.EXPENSE: frozenset({"expense", "expense_report", "receipt"}),
    ExtractionSchema.GENERIC: frozenset({"unknown"}),
}


def schema_for_document_type(document_type: object) -> ExtractionSchema | None:
    """Map an extracted ``documentType`` value back to its schema."""
    if not isinstance(document_type, str) or not document_type:
        return None
    for schema, values in PDF_DOCUMENT_TYPES.items():
        if document_type in values:
            return schema
    return ExtractionSchema.GENERIC
