"""Tests for absolute scores and relative improvements."""

import pytest

from prompt_autotuner.scoring import absolute_score, floor_improvement, relative_improvement
from prompt_autotuner.tests.helpers import make_metrics
from prompt_autotuner.types import ImprovementWeights, ModelMetrics


def test_empty_metrics_score_zero():
    """No metrics means a score of 0."""
    assert absolute_score([]) == 0.0


def test_failed_entries_are_skipped():
    """Entries without samples do not drag the average down."""
    metrics = [make_metrics("a", 0.0, 1.0, 1.0), ModelMetrics.failed("b")]

    assert absolute_score(metrics) == 100.0
    assert absolute_score([ModelMetrics.failed("b")]) == 0.0


def test_score_formula():
    """(1 - 0.6) * 40 + 0.2 * 30 + 0.3 * 30 = 31."""
    assert absolute_score([make_metrics("a", 0.6, 0.2, 0.3)]) == pytest.approx(31.0)


def test_score_averages_models():
    """The score is the mean over usable models."""
    metrics = [make_metrics("a", 0.0, 1.0, 1.0), make_metrics("b", 1.0, 0.0, 0.0)]

    assert absolute_score(metrics) == pytest.approx(50.0)


def test_relative_improvement_weighted():
    """Halving hallucination and raising the others by half gives +50%."""
    original = make_metrics("a", 0.5, 0.5, 0.5)
    optimized = make_metrics("a", 0.25, 0.75, 0.75)

    assert relative_improvement(original, optimized) == pytest.approx(50.0)


def test_relative_improvement_is_positive_when_worse():
    """A regression is reported as a positive value."""
    original = make_metrics("a", 0.25, 0.75, 0.75)
    optimized = make_metrics("a", 0.5, 0.5, 0.5)

    improvement = relative_improvement(original, optimized)

    assert improvement > 0
    # Raw change is -100 * 0.4 - 33.3 * 0.3 - 33.3 * 0.3 = -60, floored to 61.
    assert improvement == pytest.approx(61.0)


def test_relative_improvement_zero_baseline():
    """Zero baselines contribute nothing and the floor yields 1."""
    original = make_metrics("a", 0.0, 0.0, 0.0)
    optimized = make_metrics("a", 0.5, 0.5, 0.5)

    assert relative_improvement(original, optimized) == 1.0


def test_custom_weights():
    """Only weighted metrics count."""
    original = make_metrics("a", 0.5, 0.5, 0.5)
    optimized = make_metrics("a", 0.5, 1.0, 0.5)
    weights = ImprovementWeights(hallucination=0.0, structure=1.0, consistency=0.0)

    assert relative_improvement(original, optimized, weights) == pytest.approx(100.0)


@pytest.mark.parametrize(
    "value, expected",
    [
        (25.0, 25.0),
        (0.0, 1.0),
        (-10.0, 11.0),
        (float("nan"), 1.0),
        (float("inf"), 1.0),
        (float("-inf"), 1.0),
    ],
)
def test_floor_improvement(value, expected):
    """Improvements are always finite and strictly positive."""
    assert floor_improvement(value) == expected
