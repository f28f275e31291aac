"""Composite scoring for combining per-dimension scores."""

from collections.abc import Iterable, Mapping

from search_eval.models.model_config import Dimension


def calculate_weighted_score(
    scores: Mapping[str, float],
    dimensions: Iterable[Dimension],
) -> float:
    """Calculate the weighted average over the dimensions that were scored.

    Dimensions missing from ``scores`` are left out of both the numerator and
    the denominator, so weights need not sum to 1.0.

    Args:
        scores: Score per dimension name.
        dimensions: Dimension configuration with weights.

    Returns:
        Weighted average, or 0.0 when no configured dimension was scored.
    """
    total_weight = 0.0
    weighted_sum = 0.0

    for dimension in dimensions:
        if dimension.name in scores:
            weighted_sum += scores[dimension.name] * dimension.weight
            total_weight += dimension.weight

    return weighted_sum / total_weight if total_weight > 0 else 0.0
