"""Base connector class for completion backends."""

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field


class CompletionParams(BaseModel):
    """Sampling parameters for a single completion."""

    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    max_tokens: int | None = Field(default=None, gt=0)
    system_prompt: str | None = Field(
        default=None, description="Sent as a system message ahead of the prompt"
    )


class BaseConnector(ABC):
    """Base class for connectors that complete prompts with a named model.

    Users should implement this class to route completions to their own
    providers. Implementations raise on failure; callers isolate the error.
    """

    @abstractmethod
    async def complete(
        self, model_name: str, prompt: str, params: CompletionParams | None = None
    ) -> str:
        """Complete a prompt with the given model.

        Args:
            model_name: Name of the model to use
            prompt: The prompt to send as the user message
            params: Optional sampling parameters

        Returns:
            The model's response as a string
        """
        ...
