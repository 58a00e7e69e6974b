"""Exceptions raised by the prompt autotuner."""


class PromptAutotunerError(Exception):
    """Base class for all autotuner errors."""


class RequestValidationError(PromptAutotunerError, ValueError):
    """Required input is missing or malformed. Raised before any evaluation starts."""


class UpstreamEvaluationError(PromptAutotunerError):
    """A single model or benchmark call failed."""

    def __init__(self, model: str, message: str):
        self.model = model
        super().__init__(f"{model}: {message}")


class BudgetExceeded(PromptAutotunerError, TimeoutError):
    """An operation ran past its wall-clock budget."""

    def __init__(self, operation: str, budget_seconds: float):
        self.operation = operation
        self.budget_seconds = budget_seconds
        super().__init__(f"{operation} exceeded its {budget_seconds:g}s budget")
