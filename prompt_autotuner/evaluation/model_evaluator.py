"""Run prompts against models and benchmarks and derive quality metrics."""

import asyncio
import logging
import random
import time
from collections import defaultdict

from prompt_autotuner.budget import run_with_budget
from prompt_autotuner.config import AutotunerConfig
from prompt_autotuner.connectors import BaseConnector, CompletionParams
from prompt_autotuner.evaluation.benchmarks import (
    build_system_prompt,
    format_question,
    parse_answer,
    sample_questions,
)
from prompt_autotuner.evaluation.heuristics import (
    consistency_score,
    hallucination_rate,
    structure_score,
)
from prompt_autotuner.types import (
    BenchmarkConfig,
    BenchmarkMetrics,
    BenchmarkQuestion,
    ModelConfig,
    ModelMetrics,
)

logger = logging.getLogger(__name__)

INPUT_PLACEHOLDER = "{input}"


class ModelEvaluationClient:
    """Executes prompts against configured models and benchmark datasets.

    The client keeps no state between calls: every call creates its own
    concurrency limiter and result lists.
    """

    def __init__(
        self,
        connector: BaseConnector,
        config: AutotunerConfig | None = None,
        rng: random.Random | None = None,
    ):
        """
        Initialize the evaluation client.

        Args:
            connector: Completion transport for all models
            config: Autotuner configuration (defaults if None)
            rng: Random source for benchmark sampling
        """
        self.connector = connector
        self.config = config or AutotunerConfig()
        self.rng = rng or random.Random()

    async def evaluate_models(
        self,
        prompt: str,
        model_configs: list[ModelConfig] | tuple[ModelConfig, ...],
        sample_size: int | None = None,
    ) -> list[ModelMetrics]:
        """
        Sample every enabled model with the prompt and score the completions.

        Args:
            prompt: Prompt to evaluate
            model_configs: Models to evaluate against; disabled entries are skipped
            sample_size: Completions per model (config default if None)

        Returns:
            One ModelMetrics per enabled model, in config order. Models that
            could not be evaluated have total_samples=0.
        """
        sample_size = sample_size or self.config.default_sample_size
        enabled = [model for model in model_configs if model.enabled]
        semaphore = asyncio.Semaphore(self.config.max_concurrent_requests)

        logger.info(
            f"Evaluating prompt against {len(enabled)} models with {sample_size} samples each"
        )
        results = await asyncio.gather(
            *[self._evaluate_model(prompt, model, sample_size, semaphore) for model in enabled]
        )
        return list(results)

    async def evaluate_with_input(
        self,
        prompt: str,
        evaluation_input: str,
        model_configs: list[ModelConfig] | tuple[ModelConfig, ...],
        sample_size: int | None = None,
    ) -> list[ModelMetrics]:
        """
        Evaluate the prompt applied to a concrete input instead of the bare instruction.

        The input replaces an ``{input}`` placeholder when the prompt has one and
        is appended to the prompt otherwise.

        Args:
            prompt: Prompt to evaluate
            evaluation_input: Example input the prompt is meant to handle
            model_configs: Models to evaluate against
            sample_size: Completions per model (config default if None)

        Returns:
            One ModelMetrics per enabled model, in config order
        """
        return await self.evaluate_models(
            compose_with_input(prompt, evaluation_input), model_configs, sample_size
        )

    async def evaluate_benchmarks(
        self, prompt: str, benchmark_configs: list[BenchmarkConfig]
    ) -> list[BenchmarkMetrics]:
        """
        Use the prompt as the system prompt of a multiple-choice solver.

        Args:
            prompt: Prompt to evaluate
            benchmark_configs: Benchmarks to run; disabled entries are skipped

        Returns:
            One BenchmarkMetrics per enabled benchmark, in config order
        """
        enabled = [benchmark for benchmark in benchmark_configs if benchmark.enabled]
        semaphore = asyncio.Semaphore(self.config.max_concurrent_requests)
        results = await asyncio.gather(
            *[self._run_benchmark(prompt, benchmark, semaphore) for benchmark in enabled]
        )
        return list(results)

    async def _evaluate_model(
        self,
        prompt: str,
        model: ModelConfig,
        sample_size: int,
        semaphore: asyncio.Semaphore,
    ) -> ModelMetrics:
        """Collect samples from one model and turn them into metrics."""
        params = CompletionParams(temperature=model.temperature, max_tokens=model.max_tokens)
        outcomes = await asyncio.gather(
            *[self._complete(model.name, prompt, params, semaphore) for _ in range(sample_size)],
            return_exceptions=True,
        )

        responses = []
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                logger.warning(f"Sample from {model.name} failed: {outcome}")
            else:
                responses.append(outcome)

        if not responses:
            logger.warning(f"No usable samples from {model.name}, excluding it from aggregation")
            return ModelMetrics.failed(model.name)

        metrics = ModelMetrics(
            model=model.name,
            total_samples=len(responses),
            hallucination_rate=hallucination_rate(responses),
            structure_score=structure_score(responses),
            consistency_score=consistency_score(responses),
            responses=responses,
        )
        logger.info(
            f"{model.name}: hallucination={metrics.hallucination_rate:.2f} "
            f"structure={metrics.structure_score:.2f} "
            f"consistency={metrics.consistency_score:.2f} ({metrics.total_samples} samples)"
        )
        return metrics

    async def _complete(
        self,
        model_name: str,
        prompt: str,
        params: CompletionParams,
        semaphore: asyncio.Semaphore,
    ) -> str:
        """Issue one completion under the concurrency limit and per-request timeout."""
        async with semaphore:
            logger.debug(f"Requesting completion from {model_name}: {prompt[:50]}...")
            response = await run_with_budget(
                self.connector.complete(model_name, prompt, params),
                self.config.request_timeout_seconds,
                f"completion from {model_name}",
            )
            logger.debug(f"Received response from {model_name}: {response[:100]}...")
            return response

    async def _run_benchmark(
        self, prompt: str, benchmark: BenchmarkConfig, semaphore: asyncio.Semaphore
    ) -> BenchmarkMetrics:
        """Ask every sampled question and tally correct answers."""
        questions = sample_questions(
            benchmark.name, benchmark.sample_size, benchmark.full_dataset, self.rng
        )
        system_prompt = build_system_prompt(prompt, benchmark.name)
        outcomes = await asyncio.gather(
            *[self._answer_question(system_prompt, question, semaphore) for question in questions]
        )

        correct = sum(1 for is_correct, _ in outcomes if is_correct)
        by_category: dict[str, list[bool]] = defaultdict(list)
        for question, (is_correct, _) in zip(questions, outcomes):
            by_category[question.category or "general"].append(is_correct)
        category_breakdown = {
            category: sum(marks) / len(marks) for category, marks in by_category.items()
        }
        average_response_time = (
            sum(elapsed for _, elapsed in outcomes) / len(outcomes) if outcomes else 0.0
        )

        metrics = BenchmarkMetrics.from_counts(
            benchmark=benchmark.name,
            total_questions=len(questions),
            correct_answers=correct,
            category_breakdown=category_breakdown,
            average_response_time=average_response_time,
        )
        logger.info(
            f"{benchmark.name.value}: {correct}/{len(questions)} correct "
            f"(accuracy {metrics.accuracy:.2%})"
        )
        return metrics

    async def _answer_question(
        self, system_prompt: str, question: BenchmarkQuestion, semaphore: asyncio.Semaphore
    ) -> tuple[bool, float]:
        """Pose one question. A failed call counts as an incorrect answer."""
        llm = self.config.benchmark_llm
        params = CompletionParams(
            system_prompt=system_prompt,
            temperature=llm.temperature,
            max_tokens=llm.max_tokens,
        )
        start_time = time.time()
        try:
            response = await self._complete(llm.model, format_question(question), params, semaphore)
        except Exception as e:
            logger.warning(f"Benchmark question {question.id} failed: {e}")
            return False, time.time() - start_time

        return parse_answer(response, question) == question.correct_answer, time.time() - start_time


def compose_with_input(prompt: str, evaluation_input: str) -> str:
    """Substitute or append a concrete input to a prompt."""
    if INPUT_PLACEHOLDER in prompt:
        return prompt.replace(INPUT_PLACEHOLDER, evaluation_input)
    return f"{prompt}\n\nInput:\n{evaluation_input}"
