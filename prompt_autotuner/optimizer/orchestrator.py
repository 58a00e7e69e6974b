"""Top-level orchestration of prompt evaluation and optimization."""

import asyncio
import logging
import time
from typing import Any

from pydantic import ValidationError

from prompt_autotuner.budget import run_with_budget
from prompt_autotuner.config import AutotunerConfig
from prompt_autotuner.connectors import BaseConnector
from prompt_autotuner.errors import BudgetExceeded, RequestValidationError
from prompt_autotuner.evaluation import ModelEvaluationClient, SemanticScorer
from prompt_autotuner.optimizer.auto_optimizer import AutoOptimizer, build_trigger, new_candidate
from prompt_autotuner.optimizer.context import EvaluationContext
from prompt_autotuner.optimizer.prompt_rewriter import PromptRewriter
from prompt_autotuner.scoring import (
    absolute_score,
    calculate_confidence,
    floor_improvement,
    relative_improvement,
)
from prompt_autotuner.storage import SessionRecorder
from prompt_autotuner.strategies import BASIC_EXPLANATION, HYBRID, basic_optimization
from prompt_autotuner.types import (
    AutoOptimizationResult,
    EvaluationReport,
    EvaluationRequest,
    ModelMetrics,
    OptimizationResult,
)

logger = logging.getLogger(__name__)


def budget_fallback_result(
    prompt: str, current_score: float, threshold: float, execution_time: float
) -> AutoOptimizationResult:
    """
    Auto-optimization result used when there is no time left to evaluate candidates.

    The prompt is rewritten with the hybrid template and returned unscored.
    """
    candidate = new_candidate(prompt, HYBRID)
    return AutoOptimizationResult(
        trigger=build_trigger(current_score, threshold),
        original_prompt=prompt,
        original_score=current_score,
        candidates=[candidate],
        selected_candidate=candidate,
        improvement=0.0,
        strategy=HYBRID.name,
        execution_time=execution_time,
        status="no_improvement",
    )


class EvaluationOrchestrator:
    """Evaluates original/optimized prompt pairs and re-optimizes weak prompts.

    Every request gets its own EvaluationContext; the orchestrator holds only
    its collaborators and immutable configuration.
    """

    def __init__(
        self,
        connector: BaseConnector,
        config: AutotunerConfig | None = None,
        evaluator: ModelEvaluationClient | None = None,
        auto_optimizer: AutoOptimizer | None = None,
        rewriter: PromptRewriter | None = None,
        semantic_scorer: SemanticScorer | None = None,
        recorder: SessionRecorder | None = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            connector: Completion transport shared by all collaborators
            config: Autotuner configuration (defaults if None)
            evaluator: Model evaluation client (built from connector if None)
            auto_optimizer: Auto-optimizer (built from evaluator if None)
            rewriter: Primary optimizer (built from connector if None)
            semantic_scorer: Optional semantic scoring service
            recorder: Optional session sink
        """
        self.config = config or AutotunerConfig()
        self.evaluator = evaluator or ModelEvaluationClient(connector, self.config)
        self.auto_optimizer = auto_optimizer or AutoOptimizer(self.evaluator, self.config)
        self.rewriter = rewriter or PromptRewriter(connector, self.config.optimizer_llm)
        self.semantic_scorer = semantic_scorer
        self.recorder = recorder

    @staticmethod
    def build_request(**fields: Any) -> EvaluationRequest:
        """
        Validate raw input into an EvaluationRequest.

        Raises:
            RequestValidationError: If required input is missing or malformed
        """
        try:
            return EvaluationRequest(**fields)
        except ValidationError as e:
            raise RequestValidationError(f"Invalid evaluation request: {e}") from e

    async def run(
        self,
        prompt: str,
        model_configs: list[Any],
        benchmark_configs: list[Any] | None = None,
        evaluation_input: str | None = None,
        threshold: float | None = None,
        optimized_prompt: str | None = None,
    ) -> EvaluationReport:
        """
        Run the full loop: optimize, evaluate the pair, auto-optimize if weak.

        Args:
            prompt: Original prompt
            model_configs: Models to evaluate against (ModelConfig or dicts)
            benchmark_configs: Optional benchmarks (BenchmarkConfig or dicts)
            evaluation_input: Optional concrete input for the prompt
            threshold: Score threshold (config default if None)
            optimized_prompt: Skip the primary optimizer and use this rewrite

        Returns:
            Evaluation report

        Raises:
            RequestValidationError: If the input is invalid
        """
        request = self.build_request(
            original_prompt=prompt,
            optimized_prompt=optimized_prompt,
            model_configs=model_configs,
            benchmark_configs=benchmark_configs or [],
            evaluation_input=evaluation_input,
            threshold=threshold,
        )
        return await self.evaluate(request)

    async def optimize(self, prompt: str) -> OptimizationResult:
        """
        Rewrite a prompt with the primary optimizer, falling back to the basic transform.

        The primary optimizer runs under the optimization budget. If it times
        out or fails, the deterministic basic transform is used instead.

        Args:
            prompt: Prompt to optimize

        Returns:
            Optimization result with confidence attached

        Raises:
            RequestValidationError: If the prompt is empty
        """
        if not prompt or not prompt.strip():
            raise RequestValidationError("Prompt must not be empty")

        try:
            output = await run_with_budget(
                self.rewriter.rewrite(prompt),
                self.config.optimization_budget_seconds,
                "optimization",
            )
            result = OptimizationResult(
                original_content=prompt,
                optimized_content=output.optimized_prompt,
                explanation=output.explanation,
                changes=output.changes,
                optimizer="llm",
            )
        except BudgetExceeded:
            result = self._basic_optimization(prompt)
        except Exception as e:
            logger.warning(f"Primary optimizer failed, using basic transform: {e}")
            result = self._basic_optimization(prompt)

        validation_passed = bool(result.optimized_content.strip()) and (
            result.optimized_content != prompt
        )
        confidence = calculate_confidence(result, result.explanation, validation_passed)
        result = result.model_copy(
            update={"confidence": confidence.score, "confidence_explanation": confidence}
        )
        logger.info(
            f"Optimization by {result.optimizer} optimizer: {len(result.changes)} changes, "
            f"confidence {confidence.percentage}% ({confidence.risk_level} risk)"
        )

        self._record(
            "optimize", {"prompt": prompt}, result.model_dump(mode="json"), result.optimizer
        )
        return result

    async def evaluate(self, request: EvaluationRequest) -> EvaluationReport:
        """
        Evaluate an original/optimized prompt pair and re-optimize if it is weak.

        Args:
            request: Validated evaluation request

        Returns:
            Report with status "completed", "degraded" (evaluation budget
            exceeded) or "failed" (unexpected error)

        Raises:
            RequestValidationError: If no enabled model is configured
        """
        self._validate(request)
        start_time = time.time()
        threshold = (
            request.threshold if request.threshold is not None else self.config.default_threshold
        )
        optimization: OptimizationResult | None = None
        optimized_prompt = request.optimized_prompt

        try:
            if optimized_prompt is None:
                optimization = await self.optimize(request.original_prompt)
                optimized_prompt = optimization.optimized_content

            status = "completed"
            try:
                context = await run_with_budget(
                    self._measure(request, optimized_prompt),
                    self.config.evaluation_budget_seconds,
                    "evaluation",
                )
            except BudgetExceeded:
                context = EvaluationContext()
                status = "degraded"

            improvements = self._model_improvements(context)
            overall_improvement = self._overall_improvement(
                improvements, context.semantic_improvement
            )
            original_score = absolute_score(context.original_results)
            optimized_score = absolute_score(context.optimized_results)
            logger.info(
                f"Scores: original {original_score:.2f}, optimized {optimized_score:.2f}, "
                f"improvement {overall_improvement:.1f}%"
            )

            auto_optimization = None
            if optimized_score < threshold:
                if status == "degraded":
                    auto_optimization = budget_fallback_result(
                        optimized_prompt,
                        optimized_score,
                        threshold,
                        time.time() - start_time,
                    )
                else:
                    auto_optimization = await self._auto_optimize(
                        optimized_prompt, optimized_score, threshold
                    )

            report = EvaluationReport(
                original_prompt=request.original_prompt,
                optimized_prompt=optimized_prompt,
                original_results=context.original_results,
                optimized_results=context.optimized_results,
                original_benchmarks=context.original_benchmarks,
                optimized_benchmarks=context.optimized_benchmarks,
                improvements=improvements,
                benchmark_improvements=self._benchmark_improvements(context),
                semantic_improvement=context.semantic_improvement,
                overall_improvement=overall_improvement,
                original_score=original_score,
                optimized_score=optimized_score,
                optimization=optimization,
                auto_optimization=auto_optimization,
                status=status,
                execution_time=time.time() - start_time,
            )
        except Exception as e:
            logger.exception(f"Evaluation failed: {e}")
            report = EvaluationReport(
                original_prompt=request.original_prompt,
                optimized_prompt=optimized_prompt or request.original_prompt,
                optimization=optimization,
                status="failed",
                error=str(e),
                execution_time=time.time() - start_time,
            )

        self._record(
            "evaluate",
            request.model_dump(mode="json"),
            report.model_dump(mode="json"),
            report.status,
        )
        return report

    def _validate(self, request: EvaluationRequest) -> None:
        """Reject requests that cannot be evaluated."""
        if not request.original_prompt.strip():
            raise RequestValidationError("Original prompt must not be empty")
        if not any(model.enabled for model in request.model_configs):
            raise RequestValidationError("At least one enabled model config is required")

    async def _measure(self, request: EvaluationRequest, optimized_prompt: str) -> EvaluationContext:
        """Evaluate both prompts concurrently against models and benchmarks."""
        if request.evaluation_input:
            original_models = self.evaluator.evaluate_with_input(
                request.original_prompt, request.evaluation_input, request.model_configs
            )
            optimized_models = self.evaluator.evaluate_with_input(
                optimized_prompt, request.evaluation_input, request.model_configs
            )
        else:
            original_models = self.evaluator.evaluate_models(
                request.original_prompt, request.model_configs
            )
            optimized_models = self.evaluator.evaluate_models(
                optimized_prompt, request.model_configs
            )

        (
            original_results,
            optimized_results,
            original_benchmarks,
            optimized_benchmarks,
        ) = await asyncio.gather(
            original_models,
            optimized_models,
            self.evaluator.evaluate_benchmarks(request.original_prompt, request.benchmark_configs),
            self.evaluator.evaluate_benchmarks(optimized_prompt, request.benchmark_configs),
        )

        semantic_improvement = await self._semantic_improvement(
            request.original_prompt, optimized_prompt, original_results, optimized_results
        )
        return EvaluationContext(
            original_results=original_results,
            optimized_results=optimized_results,
            original_benchmarks=original_benchmarks,
            optimized_benchmarks=optimized_benchmarks,
            semantic_improvement=semantic_improvement,
        )

    async def _semantic_improvement(
        self,
        original_prompt: str,
        optimized_prompt: str,
        original_results: list[ModelMetrics],
        optimized_results: list[ModelMetrics],
    ) -> float | None:
        """Ask the semantic scorer about the first model both prompts were answered by."""
        if self.semantic_scorer is None:
            return None

        for original, optimized in zip(original_results, optimized_results):
            if original.responses and optimized.responses:
                try:
                    return await self.semantic_scorer.quality_improvement(
                        original_prompt,
                        original.responses[0],
                        optimized_prompt,
                        optimized.responses[0],
                    )
                except Exception as e:
                    logger.warning(f"Semantic scoring failed, using traditional metrics only: {e}")
                    return None
        return None

    def _model_improvements(self, context: EvaluationContext) -> dict[str, float]:
        """Relative improvement per model that produced usable metrics for both prompts."""
        improvements = {}
        for original, optimized in zip(context.original_results, context.optimized_results):
            if original.usable and optimized.usable:
                improvements[original.model] = relative_improvement(
                    original, optimized, self.config.improvement_weights
                )
        return improvements

    def _overall_improvement(
        self, improvements: dict[str, float], semantic_improvement: float | None
    ) -> float:
        """Average model improvement, blended with the semantic score when available."""
        traditional = sum(improvements.values()) / len(improvements) if improvements else 0.0
        combined = traditional
        if semantic_improvement is not None:
            weight = self.config.semantic_weight
            combined = traditional * (1 - weight) + semantic_improvement * weight
        return floor_improvement(combined)

    @staticmethod
    def _benchmark_improvements(context: EvaluationContext) -> dict[str, float]:
        """Accuracy change in percentage points per benchmark."""
        return {
            original.benchmark.value: (optimized.accuracy - original.accuracy) * 100
            for original, optimized in zip(context.original_benchmarks, context.optimized_benchmarks)
        }

    async def _auto_optimize(
        self, prompt: str, current_score: float, threshold: float
    ) -> AutoOptimizationResult | None:
        """Run the auto-optimizer under the optimization budget."""
        start_time = time.time()
        try:
            result = await run_with_budget(
                self.auto_optimizer.detect_and_optimize(prompt, current_score, threshold),
                self.config.optimization_budget_seconds,
                "auto-optimization",
            )
        except BudgetExceeded:
            result = budget_fallback_result(
                prompt, current_score, threshold, time.time() - start_time
            )

        if result is not None:
            self._record(
                "auto_optimize",
                {"prompt": prompt, "current_score": current_score, "threshold": threshold},
                result.model_dump(mode="json"),
                result.status,
            )
        return result

    @staticmethod
    def _basic_optimization(prompt: str) -> OptimizationResult:
        optimized, changes = basic_optimization(prompt)
        return OptimizationResult(
            original_content=prompt,
            optimized_content=optimized,
            explanation=BASIC_EXPLANATION,
            changes=changes,
            optimizer="basic",
        )

    def _record(self, action: str, inputs: dict, outputs: dict, status: str | None) -> None:
        """Hand a session to the sink, if one is configured."""
        if self.recorder is not None and self.config.enable_session_logging:
            self.recorder.record(action, inputs, outputs, status)
