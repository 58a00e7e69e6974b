"""Tools for reducing model metrics to comparable scores."""

import logging
import math

from prompt_autotuner.types import ImprovementWeights, ModelMetrics

logger = logging.getLogger(__name__)


def absolute_score(metrics: list[ModelMetrics]) -> float:
    """
    Aggregate model metrics into a single 0-100 score.

    Each usable entry contributes (1 - hallucination) * 40 + structure * 30 +
    consistency * 30. Entries with no samples are skipped.

    Args:
        metrics: Metrics per model

    Returns:
        Average score across usable entries, 0.0 if none are usable
    """
    usable = [m for m in metrics if m.usable]
    if not usable:
        return 0.0

    components = [
        (1 - m.hallucination_rate) * 40 + m.structure_score * 30 + m.consistency_score * 30
        for m in usable
    ]
    avg_score = round(sum(components) / len(components), 2)
    logger.info(f"Aggregated {len(usable)} model metrics: score = {avg_score:.2f}")
    return max(0.0, min(100.0, avg_score))


def _percent_change(before: float, after: float) -> float:
    """Relative change from before to after in percent (0 for a zero baseline)."""
    if before == 0:
        return 0.0
    return (after - before) / before * 100


def floor_improvement(value: float) -> float:
    """
    Map an improvement onto a strictly positive value.

    Non-finite values become 1, and values at or below zero become
    abs(value) + 1.
    """
    if not math.isfinite(value):
        return 1.0
    if value <= 0:
        return abs(value) + 1
    return value


def relative_improvement(
    original: ModelMetrics,
    optimized: ModelMetrics,
    weights: ImprovementWeights | None = None,
) -> float:
    """
    Weighted percentage improvement of optimized metrics over original metrics.

    Args:
        original: Metrics of the original prompt
        optimized: Metrics of the optimized prompt
        weights: Weights for hallucination, structure and consistency

    Returns:
        Improvement in percent, always strictly positive
    """
    if weights is None:
        weights = ImprovementWeights()

    # Lower hallucination is better, so the sign is flipped.
    hallucination = -_percent_change(original.hallucination_rate, optimized.hallucination_rate)
    structure = _percent_change(original.structure_score, optimized.structure_score)
    consistency = _percent_change(original.consistency_score, optimized.consistency_score)

    combined = (
        hallucination * weights.hallucination
        + structure * weights.structure
        + consistency * weights.consistency
    )
    return floor_improvement(combined)
