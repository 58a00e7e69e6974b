"""Scripted stand-in for the model evaluation client."""

import asyncio

from prompt_autotuner.evaluation import compose_with_input
from prompt_autotuner.types import (
    BenchmarkConfig,
    BenchmarkMetrics,
    ModelConfig,
    ModelMetrics,
)

MetricTriple = tuple[float, float, float]

# Text that only the matching library transform adds to a prompt.
CLARITY_MARKER = "Please be precise"
EXAMPLES_MARKER = "Example format:"
STRUCTURE_MARKER = "Your task is to:"


def make_metrics(
    model: str, hallucination: float, structure: float, consistency: float, samples: int = 1
) -> ModelMetrics:
    """Build usable metrics with a single canned response."""
    return ModelMetrics(
        model=model,
        total_samples=samples,
        hallucination_rate=hallucination,
        structure_score=structure,
        consistency_score=consistency,
        responses=[f"response from {model}"] * samples,
    )


class ScriptedEvaluator:
    """
    Returns preset metrics for prompts instead of calling models.

    The first marker (in insertion order) found in a prompt selects its
    metrics; prompts without a known marker get the default metrics.
    """

    def __init__(
        self,
        script: dict[str, MetricTriple] | None = None,
        default: MetricTriple = (0.0, 0.5, 0.5),
        failing_markers: tuple[str, ...] = (),
        benchmark_accuracy: dict[str, float] | None = None,
        delay_seconds: float = 0.0,
    ):
        """
        Initialize the scripted evaluator.

        Args:
            script: Maps prompt markers to (hallucination, structure, consistency)
            default: Metrics for prompts without a marker
            failing_markers: Prompts containing one of these raise RuntimeError
            benchmark_accuracy: Maps prompt markers to benchmark accuracy
            delay_seconds: Artificial latency of every model evaluation
        """
        self.script = script or {}
        self.default = default
        self.failing_markers = failing_markers
        self.benchmark_accuracy = benchmark_accuracy or {}
        self.delay_seconds = delay_seconds
        self.calls: list[str] = []

    def _lookup(self, prompt: str) -> MetricTriple:
        for marker, triple in self.script.items():
            if marker in prompt:
                return triple
        return self.default

    async def evaluate_models(
        self,
        prompt: str,
        model_configs: list[ModelConfig] | tuple[ModelConfig, ...],
        sample_size: int | None = None,
    ) -> list[ModelMetrics]:
        self.calls.append(prompt)
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        for marker in self.failing_markers:
            if marker in prompt:
                raise RuntimeError(f"scripted failure for '{marker}'")

        hallucination, structure, consistency = self._lookup(prompt)
        return [
            make_metrics(model.name, hallucination, structure, consistency)
            for model in model_configs
            if model.enabled
        ]

    async def evaluate_with_input(
        self,
        prompt: str,
        evaluation_input: str,
        model_configs: list[ModelConfig] | tuple[ModelConfig, ...],
        sample_size: int | None = None,
    ) -> list[ModelMetrics]:
        return await self.evaluate_models(
            compose_with_input(prompt, evaluation_input), model_configs, sample_size
        )

    async def evaluate_benchmarks(
        self, prompt: str, benchmark_configs: list[BenchmarkConfig]
    ) -> list[BenchmarkMetrics]:
        accuracy = next(
            (value for marker, value in self.benchmark_accuracy.items() if marker in prompt), 0.5
        )
        results = []
        for benchmark in benchmark_configs:
            if not benchmark.enabled:
                continue
            total = benchmark.sample_size
            results.append(
                BenchmarkMetrics.from_counts(benchmark.name, total, round(total * accuracy))
            )
        return results
