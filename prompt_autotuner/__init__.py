"""
Prompt Autotuner - evaluation-driven prompt optimization.

Measures a prompt by sampling one or more language models (and optionally
multiple-choice benchmarks), reduces the results to a 0-100 score, and when
the score falls below a threshold rewrites the prompt with a fixed library of
deterministic strategies, re-evaluates each rewrite and selects the best one.

Public API:
- BaseConnector: Abstract base class for completion backends
- OpenAIConnector: Built-in connector for OpenAI-compatible models
- FunctionConnector: Connector wrapping a Python function
- AutotunerConfig: Configuration for the loop
- ModelEvaluationClient: Runs prompts against models and benchmarks
- AutoOptimizer: Detects weak prompts and selects the best rewrite
- EvaluationOrchestrator: Top-level evaluate-and-optimize entry point
- AutotuneRunner: Orchestrator wired to storage and reporting
"""

from prompt_autotuner.config import AutotunerConfig, load_config
from prompt_autotuner.connectors import BaseConnector, FunctionConnector, OpenAIConnector
from prompt_autotuner.evaluation import ModelEvaluationClient
from prompt_autotuner.optimizer import AutoOptimizer, EvaluationOrchestrator
from prompt_autotuner.runner import AutotuneRunner

__all__ = [
    "AutoOptimizer",
    "AutotuneRunner",
    "AutotunerConfig",
    "BaseConnector",
    "EvaluationOrchestrator",
    "FunctionConnector",
    "ModelEvaluationClient",
    "OpenAIConnector",
    "load_config",
]
