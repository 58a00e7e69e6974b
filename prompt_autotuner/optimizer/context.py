"""Per-request context carrying the measurements of one evaluation."""

from pydantic import BaseModel, Field

from prompt_autotuner.types import BenchmarkMetrics, ModelMetrics


class EvaluationContext(BaseModel):
    """
    Measurements gathered while evaluating an original/optimized prompt pair.

    Each orchestrated evaluation creates its own context, so nothing here is
    shared between concurrent requests.
    """

    original_results: list[ModelMetrics] = Field(default_factory=list)
    optimized_results: list[ModelMetrics] = Field(default_factory=list)
    original_benchmarks: list[BenchmarkMetrics] = Field(default_factory=list)
    optimized_benchmarks: list[BenchmarkMetrics] = Field(default_factory=list)
    semantic_improvement: float | None = Field(
        default=None, description="Quality improvement from the semantic scorer, if available"
    )
