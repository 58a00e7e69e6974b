"""Scoring of prompt metrics and of proposed optimizations."""

from prompt_autotuner.scoring.confidence import calculate_confidence
from prompt_autotuner.scoring.score_aggregator import (
    absolute_score,
    floor_improvement,
    relative_improvement,
)

__all__ = [
    "absolute_score",
    "calculate_confidence",
    "floor_improvement",
    "relative_improvement",
]
