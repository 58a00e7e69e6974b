"""Autonomous re-optimization of prompts that score below a threshold."""

import asyncio
import logging
import time
import uuid
from collections.abc import Callable
from enum import Enum

from prompt_autotuner.config import AutotunerConfig
from prompt_autotuner.evaluation import ModelEvaluationClient
from prompt_autotuner.scoring import absolute_score
from prompt_autotuner.strategies import STRATEGY_LIBRARY, apply_strategy
from prompt_autotuner.types import (
    AutoOptimizationCandidate,
    AutoOptimizationResult,
    AutoOptimizationStrategy,
    AutoOptimizationTrigger,
)

logger = logging.getLogger(__name__)


class OptimizerState(str, Enum):
    """States of one detect-and-optimize attempt."""

    IDLE = "idle"
    DETECTING = "detecting"
    GENERATING = "generating"
    EVALUATING = "evaluating"
    SELECTING = "selecting"
    SUCCESS = "success"
    NO_IMPROVEMENT = "no_improvement"
    FAILED = "failed"


def format_score(value: float) -> str:
    """Render a score without a trailing '.0' (31.0 -> '31', 45.5 -> '45.5')."""
    return str(int(value)) if float(value).is_integer() else str(value)


def build_trigger(current_score: float, threshold: float) -> AutoOptimizationTrigger:
    """Record why an optimization attempt was started."""
    return AutoOptimizationTrigger(
        threshold=threshold,
        reason=(
            f"Score {format_score(current_score)}% below threshold {format_score(threshold)}%"
        ),
        original_score=current_score,
    )


def new_candidate(prompt: str, strategy: AutoOptimizationStrategy) -> AutoOptimizationCandidate:
    """Create an unscored candidate by applying a strategy to a prompt."""
    return AutoOptimizationCandidate(
        id=f"auto-{uuid.uuid4().hex[:8]}",
        prompt=apply_strategy(prompt, strategy),
        strategy=strategy,
    )


def fallback_candidate(
    prompt: str, strategy: AutoOptimizationStrategy
) -> AutoOptimizationCandidate:
    """Candidate wrapping the unmodified prompt, used when an attempt fails."""
    return AutoOptimizationCandidate(id="fallback", prompt=prompt, strategy=strategy)


class AutoOptimizer:
    """Detects weak prompts and searches the strategy library for a better one.

    Each call to detect_and_optimize owns its candidate list; the optimizer
    itself holds only immutable configuration, so one instance can serve
    concurrent requests.
    """

    def __init__(
        self,
        evaluator: ModelEvaluationClient,
        config: AutotunerConfig | None = None,
        strategies: tuple[AutoOptimizationStrategy, ...] = STRATEGY_LIBRARY,
        state_callback: Callable[[OptimizerState], None] | None = None,
    ):
        """
        Initialize the auto-optimizer.

        Args:
            evaluator: Client used to score candidates
            config: Autotuner configuration (defaults if None)
            strategies: Strategy library in priority order
            state_callback: Optional callback notified of every state transition
        """
        self.evaluator = evaluator
        self.config = config or AutotunerConfig()
        self.strategies = tuple(strategies)
        self._notify = state_callback or (lambda state: None)

    async def detect_and_optimize(
        self, prompt: str, current_score: float, threshold: float | None = None
    ) -> AutoOptimizationResult | None:
        """
        Optimize a prompt when its score is below the threshold.

        Args:
            prompt: Prompt to optimize
            current_score: The prompt's current absolute score (0-100)
            threshold: Minimum acceptable score (config default if None)

        Returns:
            The attempt's result, or None if the score meets the threshold
        """
        threshold = self.config.default_threshold if threshold is None else threshold
        start_time = time.time()

        self._notify(OptimizerState.DETECTING)
        if current_score >= threshold:
            logger.info(
                f"Score {format_score(current_score)} meets threshold "
                f"{format_score(threshold)}, no optimization needed"
            )
            return None

        trigger = build_trigger(current_score, threshold)
        logger.info(f"Auto-optimization triggered: {trigger.reason}")

        try:
            self._notify(OptimizerState.GENERATING)
            candidates = self.generate_candidates(prompt)

            self._notify(OptimizerState.EVALUATING)
            scored = await self.evaluate_candidates(candidates)

            self._notify(OptimizerState.SELECTING)
            result = self.select(trigger, prompt, current_score, scored, start_time)
        except Exception as e:
            logger.error(f"Auto-optimization failed: {e}", exc_info=True)
            result = self.failed_result(trigger, prompt, current_score, start_time)

        self._notify(OptimizerState(result.status))
        return result

    def generate_candidates(self, prompt: str) -> list[AutoOptimizationCandidate]:
        """Apply the highest-priority strategies to the prompt, one candidate each."""
        strategies = self.strategies[: self.config.max_candidates]
        candidates = [new_candidate(prompt, strategy) for strategy in strategies]
        logger.info(
            f"Generated {len(candidates)} candidates: "
            f"{', '.join(c.strategy.name for c in candidates)}"
        )
        return candidates

    async def evaluate_candidates(
        self, candidates: list[AutoOptimizationCandidate]
    ) -> list[AutoOptimizationCandidate]:
        """Score all candidates concurrently, returning new scored instances in input order."""
        return list(await asyncio.gather(*[self._score_candidate(c) for c in candidates]))

    async def _score_candidate(
        self, candidate: AutoOptimizationCandidate
    ) -> AutoOptimizationCandidate:
        """Evaluate one candidate. A failure scores it 0 without affecting the others."""
        try:
            results = await self.evaluator.evaluate_models(
                candidate.prompt,
                self.config.evaluator_models,
                sample_size=self.config.candidate_sample_size,
            )
        except Exception as e:
            logger.warning(f"Evaluation of candidate {candidate.id} failed: {e}")
            return candidate.model_copy(update={"evaluation_results": [], "score": 0.0})

        score = absolute_score(results)
        logger.info(f"Candidate {candidate.id} ({candidate.strategy.name}) scored {score:.2f}")
        return candidate.model_copy(update={"evaluation_results": results, "score": score})

    def select(
        self,
        trigger: AutoOptimizationTrigger,
        prompt: str,
        current_score: float,
        candidates: list[AutoOptimizationCandidate],
        start_time: float,
    ) -> AutoOptimizationResult:
        """Rank candidates and decide whether the best one is an improvement."""
        # sorted() is stable, so equal scores keep generation order.
        ranked = sorted(candidates, key=lambda c: c.score or 0.0, reverse=True)
        if not ranked:
            raise ValueError("No candidates to select from")
        best = ranked[0]
        best_score = best.score or 0.0

        if best_score <= current_score:
            logger.info(
                f"No candidate beat the current score {format_score(current_score)} "
                f"(best {format_score(best_score)})"
            )
            status, improvement, strategy = "no_improvement", 0.0, "none"
        else:
            improvement = best_score - current_score
            logger.info(f"Selected '{best.strategy.name}' with improvement {improvement:.2f}")
            status, strategy = "success", best.strategy.name

        return AutoOptimizationResult(
            trigger=trigger,
            original_prompt=prompt,
            original_score=current_score,
            candidates=ranked,
            selected_candidate=best,
            improvement=improvement,
            strategy=strategy,
            execution_time=time.time() - start_time,
            status=status,
        )

    def failed_result(
        self,
        trigger: AutoOptimizationTrigger,
        prompt: str,
        current_score: float,
        start_time: float,
    ) -> AutoOptimizationResult:
        """Result of an attempt that raised before a candidate could be selected."""
        return AutoOptimizationResult(
            trigger=trigger,
            original_prompt=prompt,
            original_score=current_score,
            candidates=[],
            selected_candidate=fallback_candidate(prompt, self.strategies[0]),
            improvement=0.0,
            strategy="error",
            execution_time=time.time() - start_time,
            status="failed",
        )
