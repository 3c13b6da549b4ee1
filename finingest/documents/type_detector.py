"""Header-based detection of a spreadsheet's semantic type."""

import re
from collections.abc import Sequence
from dataclasses import dataclass

from finingest.documents.models import DetectedType
from finingest.documents.scoring import DetectionConfig
from finingest.documents.types import TabularType

_CANDIDATES: tuple[TabularType, ...] = (
    TabularType.PL,
    TabularType.PAYROLL,
    TabularType.EMPLOYEES,
)


@dataclass(frozen=True)
class _Score:
    type: TabularType
    score: int
    matched: tuple[str, ...]


def detect_tabular_type(
    headers: Sequence[str],
    config: DetectionConfig = DetectionConfig(),
) -> DetectedType:
    """Detect the type of tabular data from its column headers.

    Each candidate type is scored by how many headers hit its general
    patterns (each pattern counted once) plus a bonus per header hitting one
    of its unique patterns. The best score at or above ``config.min_score``
    wins; equal scores fall back to candidate priority (P&L, payroll, roster).
    """
    if not headers:
        return DetectedType(type=TabularType.UNKNOWN, confidence=0.0)

    normalized = [h.lower().strip() for h in headers]
    scores = [_score(t, headers, normalized, config) for t in _CANDIDATES]
    # stable sort keeps candidate priority among equal scores
    best = sorted(scores, key=lambda s: -s.score)[0]

    if best.score < config.min_score:
        return DetectedType(type=TabularType.UNKNOWN, confidence=0.0)

    confidence = min(best.score / (len(headers) + config.confidence_padding), 1.0)
    return DetectedType(
        type=best.type,
        confidence=round(confidence, 2),
        matched_columns=best.matched,
    )


def _score(
    tabular_type: TabularType,
    headers: Sequence[str],
    normalized: Sequence[str],
    config: DetectionConfig,
) -> _Score:
    profile = tabular_type.profile
    matched: list[str] = []
    used_patterns: set[str] = set()
    unique_matches = 0

    for original, header in zip(headers, normalized):
        pattern = _first_unused_match(header, profile.patterns, used_patterns)
        if pattern is not None:
            used_patterns.add(pattern.pattern)
            matched.append(original)
        if any(p.search(header) for p in profile.unique_patterns):
            unique_matches += 1

    return _Score(
        type=tabular_type,
        score=len(matched) + unique_matches * config.unique_match_weight,
        matched=tuple(matched),
    )


def _first_unused_match(
    header: str,
    patterns: Sequence[re.Pattern[str]],
    used: set[str],
) -> re.Pattern[str] | None:
    for pattern in patterns:
        if pattern.pattern not in used and pattern.search(header):
            return pattern
    return None


def tabular_type_label(tabular_type: TabularType) -> str:
    return tabular_type.label


def required_columns_for_type(tabular_type: TabularType) -> tuple[str, ...]:
    """Canonical fields an import of this type cannot do without."""
    return tabular_type.profile.required_fields
