"""Column auto-mapping with confidence scoring.

Every source header is scored against every still-unclaimed target field of
the detected type using a descending weight ladder:

1. exact match with the target field name,
2. exact match with one of the field's synonyms,
3. substring match in either direction,
4. no match.

Headers claim fields greedily in header order. The overall confidence blends
how well the required fields are covered with the mean confidence of every
mapped column, and gates whether the mapping may be applied without asking
the user.
"""

import re
from collections.abc import Sequence

from finingest.documents.models import AutoMappingResult
from finingest.documents.scoring import MatchWeights
from finingest.documents.types import IGNORE_FIELD, TabularType

_SEPARATORS_RE = re.compile(r"[_\s-]+")


def normalize_header(value: str) -> str:
    return _SEPARATORS_RE.sub("_", value.lower().strip())


def column_match_confidence(
    header: str,
    target_field: str,
    synonyms: Sequence[str],
    weights: MatchWeights = MatchWeights(),
) -> float:
    """Score a single header against a single target field."""
    normalized_header = normalize_header(header)
    if not normalized_header:
        return weights.none

    normalized_target = normalize_header(target_field)
    if normalized_header == normalized_target:
        return weights.exact

    normalized_synonyms = [normalize_header(s) for s in synonyms]
    if normalized_header in normalized_synonyms:
        return weights.synonym

    for candidate in (normalized_target, *normalized_synonyms):
        if candidate in normalized_header or normalized_header in candidate:
            return weights.partial

    return weights.none


def auto_map_columns(
    headers: Sequence[str],
    tabular_type: TabularType,
    weights: MatchWeights = MatchWeights(),
) -> AutoMappingResult:
    """Propose a header -> target field mapping for the given type."""
    profile = tabular_type.profile
    required = set(profile.required_fields)
    mappings: dict[str, str] = {}
    confidences: dict[str, float] = {}
    warnings: list[str] = []
    claimed: set[str] = set()

    for header in headers:
        best_field, best_confidence = IGNORE_FIELD, weights.none
        for target in profile.target_fields:
            if target in claimed:
                continue
            confidence = column_match_confidence(
                header, target, profile.synonyms.get(target, ()), weights
            )
            if confidence > best_confidence:
                best_field, best_confidence = target, confidence

        if best_confidence <= weights.none:
            mappings[header] = IGNORE_FIELD
            continue

        mappings[header] = best_field
        confidences[header] = best_confidence
        claimed.add(best_field)
        if best_field in required and best_confidence < weights.synonym:
            warnings.append(f'"{header}" → {best_field} (low confidence)')

    required_confidences = [
        confidences[h] for h, target in mappings.items() if target in required
    ]
    required_mapped = len(required_confidences)

    if required:
        coverage = required_mapped / len(required)
        mean_required = sum(required_confidences) / max(required_mapped, 1)
        required_score = coverage * mean_required
    else:
        required_score = 1.0

    overall = sum(confidences.values()) / len(confidences) if confidences else 0.0
    confidence = round(
        required_score * weights.required_share + overall * weights.overall_share, 2
    )

    return AutoMappingResult(
        mappings=mappings,
        confidence=confidence,
        required_fields_mapped=required_mapped,
        total_required_fields=len(required),
        should_auto_apply=(
            confidence >= weights.auto_apply_threshold
            and required_mapped == len(required)
        ),
        warnings=warnings,
    )


def has_all_required_fields(result: AutoMappingResult) -> bool:
    return result.required_fields_mapped >= result.total_required_fields


def mapping_confidence_label(confidence: float) -> str:
    """Human-readable description of a mapping confidence."""
    if confidence >= 0.9:
        return "High confidence"
    if confidence >= 0.8:
        return "Good confidence"
    if confidence >= 0.6:
        return "Moderate confidence"
    if confidence >= 0.4:
        return "Low confidence"
    return "Very low confidence"
