from dataclasses import dataclass


@dataclass(frozen=True)
class SummaryConfig:
    """Confidence and display constants for smart summaries."""

    pdf_base_confidence: float = 0.8
    csv_base_confidence: float = 0.7
    generic_base_confidence: float = 0.5

    metric_boost: float = 0.05
    # period labels and other non-figure metrics
    metadata_boost: float = 0.02
    max_confidence: float = 1.0

    max_display_metrics: int = 3
    # totals at or below this are not worth showing as currency
    currency_threshold: float = 100.0

    numeric_column_sample_size: int = 100
    # share of rows that must parse as numbers for a column to count
    numeric_column_threshold: float = 0.5
