"""Model and benchmark evaluation of prompts."""

from prompt_autotuner.evaluation.model_evaluator import ModelEvaluationClient, compose_with_input
from prompt_autotuner.evaluation.semantic import EmbeddingSemanticScorer, SemanticScorer

__all__ = [
    "ModelEvaluationClient",
    "compose_with_input",
    "EmbeddingSemanticScorer",
    "SemanticScorer",
]
