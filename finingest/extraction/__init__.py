from finingest.extraction.engine import ExtractionEngine
from finingest.extraction.exceptions import (
    CombinedExtractionError,
    ExtractionError,
    ExtractionNetworkError,
    ExtractionSchemaError,
    ExtractionTimeoutError,
)
from finingest.extraction.factory import ExtractionEngineFactory
from finingest.extraction.models import (
    Exhausted,
    ExtractionMethod,
    ExtractionOutcome,
    ExtractionResult,
    Ok,
    SchemaFailed,
    TimedOut,
)

__all__ = [
    "CombinedExtractionError",
    "Exhausted",
    "ExtractionEngine",
    "ExtractionEngineFactory",
    "ExtractionError",
    "ExtractionMethod",
    "ExtractionNetworkError",
    "ExtractionOutcome",
    "ExtractionResult",
    "ExtractionSchemaError",
    "ExtractionTimeoutError",
    "Ok",
    "SchemaFailed",
    "TimedOut",
]
