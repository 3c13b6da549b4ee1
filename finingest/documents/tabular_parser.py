import io

import pandas as pd

from finingest.documents.exceptions import TabularParseError
from finingest.documents.models import TabularParseResult
from finingest.logging.logger import Log


def decode_csv_bytes(content: bytes) -> str:
    """Decode CSV bytes, tolerating a UTF-8 BOM and legacy single-byte exports."""
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return content.decode("latin-1")


def parse_csv(text: str, preview_rows: int | None = None) -> TabularParseResult:
    """Parse CSV text with a header row into a TabularParseResult.

    Every cell stays text so placeholders such as "N/A" and IDs with leading
    zeros survive; numbers are read later by ``values.parse_numeric``. Blank
    lines are skipped and only empty cells become None.

    Args:
        text: Full CSV content.
        preview_rows: Keep only the first N rows in ``rows``. The total row
            count is reported regardless.

    Raises:
        TabularParseError: if the text is empty or not valid CSV.
    """
    if not text.strip():
        raise TabularParseError("File is empty. Please upload a CSV with data.")

    try:
        frame = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            na_values=[""],
            skip_blank_lines=True,
            skipinitialspace=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, ValueError) as exc:
        Log.error("CSV parsing failed", error=exc)
        raise TabularParseError(f"CSV parsing failed: {exc}") from exc

    headers = tuple(str(column) for column in frame.columns)
    cleaned = frame.astype(object).where(frame.notna(), None)
    records = cleaned.to_dict(orient="records")
    total = len(records)
    if preview_rows is not None:
        records = records[:preview_rows]

    Log.info("CSV parsed", rows=total, headers=len(headers), preview=len(records))
    return TabularParseResult(
        headers=headers,
        rows=tuple(records),
        total_row_count=total,
    )


def parse_csv_bytes(content: bytes, preview_rows: int | None = None) -> TabularParseResult:
    return parse_csv(decode_csv_bytes(content), preview_rows=preview_rows)
