"""Data types and models for evaluation-driven prompt optimization."""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ModelConfig(BaseModel):
    """A single backend to evaluate prompts against."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Model name passed to the connector")
    enabled: bool = Field(default=True, description="Whether this model takes part in evaluation")
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    max_tokens: int | None = Field(default=None, gt=0)


class ModelMetrics(BaseModel):
    """Quality metrics derived from sampling one model with one prompt."""

    model_config = ConfigDict(frozen=True)

    model: str
    total_samples: int = Field(ge=0, description="0 marks an unusable evaluation")
    hallucination_rate: float = Field(ge=0.0, le=1.0)
    structure_score: float = Field(ge=0.0, le=1.0)
    consistency_score: float = Field(ge=0.0, le=1.0)
    responses: list[str] = Field(default_factory=list)

    @property
    def usable(self) -> bool:
        """Whether the entry contributes to aggregation."""
        return self.total_samples > 0

    @classmethod
    def failed(cls, model: str) -> "ModelMetrics":
        """Build the entry recorded when a model could not be evaluated."""
        return cls(
            model=model,
            total_samples=0,
            hallucination_rate=0.0,
            structure_score=0.0,
            consistency_score=0.0,
            responses=[],
        )


class BenchmarkName(str, Enum):
    """Benchmark datasets a prompt can be evaluated on."""

    MMLU = "MMLU"
    HELLASWAG = "HellaSwag"
    TRUTHFULQA = "TruthfulQA"
    HUMANEVAL = "HumanEval"
    MBPP = "MBPP"
    WRITINGBENCH = "WritingBench"
    CONVBENCH = "ConvBench"
    SAFETYBENCH = "SafetyBench"


class BenchmarkConfig(BaseModel):
    """Which benchmark to run and how many questions to sample."""

    model_config = ConfigDict(frozen=True)

    name: BenchmarkName
    enabled: bool = True
    sample_size: int = Field(default=20, ge=1)
    full_dataset: bool = False


class BenchmarkQuestion(BaseModel):
    """A multiple-choice benchmark item."""

    model_config = ConfigDict(frozen=True)

    id: str
    question: str
    options: list[str]
    correct_answer: int = Field(ge=0, description="Index into options")
    category: str | None = None


class BenchmarkMetrics(BaseModel):
    """Accuracy of a prompt on one benchmark."""

    model_config = ConfigDict(frozen=True)

    benchmark: BenchmarkName
    total_questions: int = Field(ge=0)
    correct_answers: int = Field(ge=0)
    accuracy: float = Field(ge=0.0, le=1.0)
    category_breakdown: dict[str, float] = Field(default_factory=dict)
    average_response_time: float = Field(default=0.0, ge=0.0, description="Seconds")

    @classmethod
    def from_counts(
        cls,
        benchmark: BenchmarkName,
        total_questions: int,
        correct_answers: int,
        category_breakdown: dict[str, float] | None = None,
        average_response_time: float = 0.0,
    ) -> "BenchmarkMetrics":
        """Build metrics, deriving accuracy from the answer counts."""
        accuracy = correct_answers / total_questions if total_questions > 0 else 0.0
        return cls(
            benchmark=benchmark,
            total_questions=total_questions,
            correct_answers=correct_answers,
            accuracy=accuracy,
            category_breakdown=category_breakdown or {},
            average_response_time=average_response_time,
        )


class Change(BaseModel):
    """A single edit made while optimizing a prompt."""

    model_config = ConfigDict(frozen=True)

    type: Literal["addition", "modification", "deletion"]
    description: str = Field(description="What changed and why")
    original: str | None = None
    optimized: str | None = None


class ImprovementWeights(BaseModel):
    """Weights of each metric in the relative improvement."""

    model_config = ConfigDict(frozen=True)

    hallucination: float = Field(default=0.4, ge=0.0)
    structure: float = Field(default=0.3, ge=0.0)
    consistency: float = Field(default=0.3, ge=0.0)


class ConfidenceFactors(BaseModel):
    """Independent factor scores feeding the optimization confidence."""

    model_config = ConfigDict(frozen=True)

    change_complexity: float = Field(ge=0.1, le=1.0)
    response_quality: float = Field(ge=0.1, le=1.0)
    validation_results: float = Field(ge=0.1, le=1.0)
    structural_improvements: float = Field(ge=0.1, le=1.0)
    risk_factors: float = Field(ge=0.1, le=1.0)


class ConfidenceExplanation(BaseModel):
    """Confidence score with the factors and reasoning behind it."""

    model_config = ConfigDict(frozen=True)

    score: float = Field(ge=0.0, le=1.0)
    factors: ConfidenceFactors
    reasoning: list[str]
    risk_level: Literal["low", "medium", "high"]

    @property
    def percentage(self) -> int:
        """Score as a whole percentage."""
        return round(self.score * 100)


class OptimizationResult(BaseModel):
    """Outcome of one attempt to rewrite a prompt."""

    model_config = ConfigDict(frozen=True)

    original_content: str
    optimized_content: str
    explanation: str
    changes: list[Change] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    confidence_explanation: ConfidenceExplanation | None = None
    optimizer: Literal["llm", "basic"] = Field(
        default="llm", description="Which optimizer produced the rewrite"
    )
    timestamp: datetime = Field(default_factory=datetime.now)


class AutoOptimizationStrategy(BaseModel):
    """A named, deterministic way of rewriting a prompt."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    focus: Literal["clarity", "examples", "structure", "constraints", "hybrid"]
    prompt_modifications: tuple[str, ...]


class AutoOptimizationCandidate(BaseModel):
    """A rewritten prompt produced by one strategy."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique per generation")
    prompt: str
    strategy: AutoOptimizationStrategy
    generated_at: datetime = Field(default_factory=datetime.now)
    evaluation_results: list[ModelMetrics] | None = None
    score: float | None = Field(default=None, ge=0.0, le=100.0)


class AutoOptimizationTrigger(BaseModel):
    """Why an autonomous re-optimization attempt was started."""

    model_config = ConfigDict(frozen=True)

    type: Literal["performance_threshold"] = "performance_threshold"
    threshold: float
    reason: str
    original_score: float
    timestamp: datetime = Field(default_factory=datetime.now)


class AutoOptimizationResult(BaseModel):
    """Terminal value of one auto-optimization attempt."""

    model_config = ConfigDict(frozen=True)

    trigger: AutoOptimizationTrigger
    original_prompt: str
    original_score: float
    candidates: list[AutoOptimizationCandidate]
    selected_candidate: AutoOptimizationCandidate
    improvement: float = Field(ge=0.0)
    strategy: str = Field(description="Selected strategy name, 'none' or 'error'")
    execution_time: float = Field(ge=0.0, description="Seconds")
    status: Literal["success", "no_improvement", "failed"]
    timestamp: datetime = Field(default_factory=datetime.now)


class EvaluationRequest(BaseModel):
    """Input of one orchestrated evaluation."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    original_prompt: str = Field(min_length=1)
    optimized_prompt: str | None = Field(
        default=None, description="If None, the primary optimizer produces one"
    )
    model_configs: list[ModelConfig] = Field(min_length=1)
    benchmark_configs: list[BenchmarkConfig] = Field(default_factory=list)
    evaluation_input: str | None = None
    threshold: float | None = Field(default=None, ge=0.0, le=100.0)


class EvaluationReport(BaseModel):
    """Comparison of an original and an optimized prompt."""

    original_prompt: str
    optimized_prompt: str
    original_results: list[ModelMetrics] = Field(default_factory=list)
    optimized_results: list[ModelMetrics] = Field(default_factory=list)
    original_benchmarks: list[BenchmarkMetrics] = Field(default_factory=list)
    optimized_benchmarks: list[BenchmarkMetrics] = Field(default_factory=list)
    improvements: dict[str, float] = Field(
        default_factory=dict, description="Relative improvement per model"
    )
    benchmark_improvements: dict[str, float] = Field(
        default_factory=dict, description="Accuracy delta in percentage points per benchmark"
    )
    semantic_improvement: float | None = None
    overall_improvement: float = 0.0
    original_score: float = Field(default=0.0, ge=0.0, le=100.0)
    optimized_score: float = Field(default=0.0, ge=0.0, le=100.0)
    optimization: OptimizationResult | None = None
    auto_optimization: AutoOptimizationResult | None = None
    status: Literal["completed", "degraded", "failed"] = "completed"
    error: str | None = None
    execution_time: float = 0.0
    timestamp: datetime = Field(default_factory=datetime.now)


class SessionRecord(BaseModel):
    """A stored session log entry."""

    id: int | None = None
    action: str
    inputs: dict
    outputs: dict
    status: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)
