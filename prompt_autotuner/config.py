"""Configuration for the prompt autotuner with per-role LLM settings."""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from prompt_autotuner.types import ImprovementWeights, ModelConfig

logger = logging.getLogger(__name__)


class LLMConfig(BaseModel):
    """Configuration for a single LLM role."""

    model: str = Field(description="Model name (e.g., 'gpt-4o', 'claude-3-haiku')")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int | None = Field(default=None, description="Maximum tokens to generate")


DEFAULT_EVALUATOR_MODELS: tuple[ModelConfig, ...] = (
    ModelConfig(name="claude-3-haiku", enabled=True),
    ModelConfig(name="gpt-4o", enabled=True),
)


class AutotunerConfig(BaseModel):
    """Configuration for the whole evaluate-and-optimize loop."""

    model_config = ConfigDict(frozen=True)

    # Threshold policy
    default_threshold: float = Field(
        default=70.0, ge=0.0, le=100.0, description="Scores below this trigger auto-optimization"
    )

    # Wall-clock budgets
    optimization_budget_seconds: float = Field(
        default=30.0, gt=0, description="Budget for producing an optimized prompt"
    )
    evaluation_budget_seconds: float = Field(
        default=20.0, gt=0, description="Budget for evaluating an original/optimized pair"
    )
    request_timeout_seconds: float = Field(
        default=30.0, gt=0, description="Timeout of a single completion call"
    )

    # Sampling
    default_sample_size: int = Field(default=1, ge=1, description="Completions per model")
    candidate_sample_size: int = Field(
        default=1, ge=1, description="Completions per model when scoring a candidate"
    )
    max_candidates: int = Field(
        default=3, ge=1, description="Number of library strategies tried per attempt"
    )
    max_concurrent_requests: int = Field(
        default=5, ge=1, description="Upper bound on in-flight completion calls"
    )

    # Fixed evaluator model set used to score candidates
    evaluator_models: tuple[ModelConfig, ...] = Field(default=DEFAULT_EVALUATOR_MODELS)

    # Scoring weights
    improvement_weights: ImprovementWeights = Field(
        default=ImprovementWeights(),
        description="Weights for the relative improvement of each metric",
    )
    semantic_weight: float = Field(
        default=0.3, ge=0.0, le=1.0, description="Share of the semantic score in improvement"
    )

    # LLM configuration per role
    optimizer_llm: LLMConfig = Field(
        default=LLMConfig(model="gpt-4o-mini", temperature=0.3, max_tokens=2000),
        description="LLM that rewrites prompts",
    )
    benchmark_llm: LLMConfig = Field(
        default=LLMConfig(model="claude-3-haiku", temperature=0.1, max_tokens=100),
        description="LLM that answers benchmark questions",
    )
    embedding_model: str = Field(
        default="text-embedding-3-small", description="Model used by the semantic scorer"
    )

    # Storage
    storage_path: str = Field(
        default="prompt_autotuner/data/sessions.db", description="SQLite database path"
    )
    enable_session_logging: bool = Field(default=True, description="Record sessions to storage")
    reports_dir: str | None = Field(default=None, description="Where markdown reports are saved")

    # Progress reporting
    verbose: bool = Field(default=False, description="Print progress updates")

    # API Configuration
    openai_api_key: str | None = Field(
        default=None, description="OpenAI API key (if None, uses OPENAI_API_KEY env var)"
    )


ENV_OVERRIDES = {
    "AUTOTUNER_THRESHOLD": "default_threshold",
    "AUTOTUNER_OPTIMIZATION_BUDGET": "optimization_budget_seconds",
    "AUTOTUNER_EVALUATION_BUDGET": "evaluation_budget_seconds",
    "AUTOTUNER_STORAGE_PATH": "storage_path",
    "OPENAI_API_KEY": "openai_api_key",
}


def load_config(config_path: str | Path | None = None) -> AutotunerConfig:
    """Load configuration from an optional YAML file and environment variables.

    Environment variables (including those in a .env file) take precedence
    over values from the file.

    Args:
        config_path: Path to a YAML file whose top-level keys are
            AutotunerConfig fields

    Returns:
        Validated configuration

    Raises:
        FileNotFoundError: If config_path is given but does not exist
    """
    load_dotenv()

    values: dict[str, Any] = {}
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        with open(path) as f:
            values = yaml.safe_load(f) or {}
        logger.info(f"Loaded configuration from {path}")

    for env_var, field_name in ENV_OVERRIDES.items():
        env_value = os.getenv(env_var)
        if env_value:
            values[field_name] = env_value

    return AutotunerConfig(**values)


def setup_logging() -> None:
    """Set up logging configuration from the LOG_LEVEL environment variable."""
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
