"""Custom assertions for autotuner tests."""

from prompt_autotuner.types import (
    AutoOptimizationCandidate,
    AutoOptimizationResult,
    ModelMetrics,
)


def assert_candidates_sorted(candidates: list[AutoOptimizationCandidate]) -> None:
    """
    Assert that candidates are ordered by score, best first.

    Args:
        candidates: Candidates as returned in an auto-optimization result

    Raises:
        AssertionError: If a candidate is unscored or out of order
    """
    scores = [candidate.score for candidate in candidates]
    assert all(score is not None for score in scores), f"Unscored candidate in {scores}"
    assert scores == sorted(scores, reverse=True), f"Candidates not sorted: {scores}"


def assert_metrics_in_range(metrics: list[ModelMetrics]) -> None:
    """
    Assert that every metric is a valid fraction.

    Args:
        metrics: Metrics per model

    Raises:
        AssertionError: If any metric is outside [0, 1]
    """
    for entry in metrics:
        for name in ("hallucination_rate", "structure_score", "consistency_score"):
            value = getattr(entry, name)
            assert 0.0 <= value <= 1.0, f"{entry.model}.{name} out of range: {value}"


def assert_result_consistent(result: AutoOptimizationResult) -> None:
    """
    Assert the invariants every auto-optimization result must satisfy.

    Args:
        result: Auto-optimization result

    Raises:
        AssertionError: If the status, strategy and improvement disagree
    """
    assert result.improvement >= 0
    if result.status == "success":
        assert result.improvement > 0
        assert result.selected_candidate in result.candidates
        assert result.strategy == result.selected_candidate.strategy.name
        assert_candidates_sorted(result.candidates)
    elif result.status == "no_improvement":
        assert result.improvement == 0
    else:
        assert result.strategy == "error"
        assert result.candidates == []
        assert result.selected_candidate.prompt == result.original_prompt
