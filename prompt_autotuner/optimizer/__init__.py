"""Auto-optimization and evaluation orchestration."""

from prompt_autotuner.optimizer.auto_optimizer import AutoOptimizer, OptimizerState
from prompt_autotuner.optimizer.orchestrator import EvaluationOrchestrator
from prompt_autotuner.optimizer.prompt_rewriter import PromptRewriter

__all__ = [
    "AutoOptimizer",
    "EvaluationOrchestrator",
    "OptimizerState",
    "PromptRewriter",
]
