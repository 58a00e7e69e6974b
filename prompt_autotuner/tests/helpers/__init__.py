"""Test helpers for autotuner tests."""

from prompt_autotuner.tests.helpers.assertions import (
    assert_candidates_sorted,
    assert_metrics_in_range,
    assert_result_consistent,
)
from prompt_autotuner.tests.helpers.dummy_connector import DummyConnector
from prompt_autotuner.tests.helpers.scripted_evaluator import (
    CLARITY_MARKER,
    EXAMPLES_MARKER,
    STRUCTURE_MARKER,
    ScriptedEvaluator,
    make_metrics,
)

__all__ = [
    "CLARITY_MARKER",
    "EXAMPLES_MARKER",
    "STRUCTURE_MARKER",
    "DummyConnector",
    "ScriptedEvaluator",
    "make_metrics",
    "assert_candidates_sorted",
    "assert_metrics_in_range",
    "assert_result_consistent",
]
