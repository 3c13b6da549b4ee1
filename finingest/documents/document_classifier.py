from finingest.documents.types import ExtractionSchema

# Checked in order; the first category with a matching keyword wins.
_KEYWORDS: tuple[tuple[ExtractionSchema, tuple[str, ...]], ...] = (
    (
        ExtractionSchema.PL,
        ("p&l", "pl_", "_pl", "profit", "loss", "income_statement", "income-statement"),
    ),
    (
        ExtractionSchema.PAYROLL,
        ("payroll", "pay_", "_pay", "salary", "wages", "compensation"),
    ),
    (
        ExtractionSchema.EXPENSE,
        ("expense", "receipt", "spending", "reimburse"),
    ),
)


def classify_filename(filename: str | None) -> ExtractionSchema:
    """Guess the extraction schema of a PDF from its filename alone.

    Case-insensitive substring match; anything unrecognized is generic.
    """
    lower = (filename or "").lower()
    for schema, keywords in _KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return schema
    return ExtractionSchema.GENERIC
