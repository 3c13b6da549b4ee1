"""Example extraction client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseExtractionClient and register the provider in ExtractionEngineFactory.
"""

import json
from typing import ClassVar

from finingest.extraction.client_base import BaseExtractionClient


class ExampleClientAdapter(BaseExtractionClient):
    """Example adapter that returns a fixed valid payload per schema.

    No network calls. Useful for local development and tests.
    """

    DEFAULT_RESPONSES: ClassVar[dict[str, dict[str, object]]] = {
        "pl_extraction": {
            "documentType": "pl",
            "period": {"startDate": None, "endDate": None},
            "revenue": {"total": None, "lineItems": []},
            "expenses": {"total": None, "categories": []},
            "netIncome": None,
            "metadata": {"companyName": None, "preparedBy": None, "pageCount": None},
        },
        "payroll_extraction": {
            "documentType": "payroll",
            "payPeriod": {"startDate": None, "endDate": None, "payDate": None},
            "employees": [],
            "totals": {
                "totalGrossPay": None,
                "totalTaxes": None,
                "totalBenefits": None,
                "totalNetPay": None,
                "employeeCount": None,
            },
            "metadata": {"companyName": None, "payrollProvider": None},
        },
        "expense_extraction": {
            "documentType": "expense",
            "period": {"startDate": None, "endDate": None},
            "lineItems": [],
            "summary": {"totalExpenses": None, "categories": []},
            "metadata": {"companyName": None},
        },
        "generic_extraction": {
            "documentType": "unknown",
            "rawContent": None,
            "tables": [],
            "numbers": [],
        },
    }

    def complete_with_document(
        self,
        *,
        model: str,
        instruction: str,
        document: bytes,
        filename: str,
        json_schema: dict[str, object],
        schema_name: str,
        timeout_seconds: float | None = None,
    ) -> str:
        _ = model, instruction, document, filename, json_schema, timeout_seconds
        return self._respond(schema_name)

    def complete_with_text(
        self,
        *,
        model: str,
        instruction: str,
        json_schema: dict[str, object],
        schema_name: str,
        timeout_seconds: float | None = None,
    ) -> str:
        _ = model, instruction, json_schema, timeout_seconds
        return self._respond(schema_name)

    def _respond(self, schema_name: str) -> str:
        response = self.DEFAULT_RESPONSES.get(
            schema_name, self.DEFAULT_RESPONSES["generic_extraction"]
        )
        return json.dumps(response)
