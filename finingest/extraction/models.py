"""Extraction results and the tagged outcome of one extraction run.

An extraction run ends in exactly one of:

- ``Ok``: a validated result,
- ``TimedOut``: the vision call hit its timeout and no fallback ran,
- ``SchemaFailed``: an attempt failed for any other reason,
- ``Exhausted``: a primary attempt and its single fallback both failed.

Callers branch on the variant; ``unwrap()`` converts failures to exceptions
for code that prefers raising.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from finingest.documents.types import ExtractionSchema
from finingest.extraction.exceptions import (
    CombinedExtractionError,
    ExtractionSchemaError,
    ExtractionTimeoutError,
)


class ExtractionMethod(str, Enum):
    VISION = "vision"
    TEXT = "text"


@dataclass(frozen=True)
class ExtractionResult:
    """Validated, schema-shaped payload returned by the oracle."""

    schema_used: ExtractionSchema
    data: dict[str, Any]
    processing_time_ms: int
    method: ExtractionMethod
    success: bool = True


@dataclass(frozen=True)
class Ok:
    result: ExtractionResult
    elapsed_ms: int = 0

    def unwrap(self) -> ExtractionResult:
        return self.result


@dataclass(frozen=True)
class TimedOut:
    schema: ExtractionSchema
    timeout_seconds: float
    elapsed_ms: int = 0

    @property
    def cause(self) -> str:
        return f"Vision API timed out after {self.timeout_seconds:g} seconds"

    def unwrap(self) -> ExtractionResult:
        raise ExtractionTimeoutError(self.timeout_seconds)


@dataclass(frozen=True)
class SchemaFailed:
    schema: ExtractionSchema
    method: ExtractionMethod
    reason: str
    elapsed_ms: int = 0

    @property
    def cause(self) -> str:
        return f"{self.method.value} extraction ({self.schema.value}) failed: {self.reason}"

    def unwrap(self) -> ExtractionResult:
        raise ExtractionSchemaError(self.cause)


@dataclass(frozen=True)
class Exhausted:
    causes: tuple[str, ...] = field(default_factory=tuple)
    elapsed_ms: int = 0

    @property
    def cause(self) -> str:
        return ", and ".join(self.causes)

    def unwrap(self) -> ExtractionResult:
        raise CombinedExtractionError(list(self.causes))


ExtractionOutcome = Ok | TimedOut | SchemaFailed | Exhausted
