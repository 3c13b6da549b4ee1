"""Tunable weights for type detection and column mapping."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DetectionConfig:
    """Header-overlap scoring for tabular type detection."""

    # a header matching a type-unique pattern counts this many extra points
    unique_match_weight: int = 2
    # scores below this never win
    min_score: int = 2
    # added to the header count when normalizing the score into a confidence
    confidence_padding: int = 2


@dataclass(frozen=True)
class MatchWeights:
    """Descending weight ladder for header-to-field matches."""

    exact: float = 1.0
    synonym: float = 0.85
    partial: float = 0.7
    none: float = 0.0

    required_share: float = 0.7
    overall_share: float = 0.3
    auto_apply_threshold: float = 0.8
