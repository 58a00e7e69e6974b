"""Dummy connector for testing - provides fast, deterministic responses."""

import asyncio
import hashlib
import random

from prompt_autotuner.connectors.base import BaseConnector, CompletionParams
from prompt_autotuner.errors import UpstreamEvaluationError


class DummyConnector(BaseConnector):
    """
    A dummy connector that generates fast, deterministic model responses.

    This connector doesn't make real API calls, making tests fast and reproducible.
    Prompts that ask for structure or examples get organized, multi-paragraph
    answers; bare prompts get a single flat sentence.
    """

    def __init__(
        self,
        seed: int = 42,
        failing_models: set[str] | None = None,
        delay_seconds: float = 0.0,
    ):
        """
        Initialize the dummy connector.

        Args:
            seed: Random seed for deterministic responses
            failing_models: Models whose calls raise UpstreamEvaluationError
            delay_seconds: Artificial latency added to every call
        """
        self.seed = seed
        self.failing_models = failing_models or set()
        self.delay_seconds = delay_seconds
        self.call_count = 0
        self.calls: list[tuple[str, str]] = []

    async def complete(
        self, model_name: str, prompt: str, params: CompletionParams | None = None
    ) -> str:
        """
        Generate a dummy response based on the model and prompt.

        Args:
            model_name: Model being "called"
            prompt: The prompt to respond to
            params: Ignored sampling parameters

        Returns:
            A generated response string
        """
        self.call_count += 1
        self.calls.append((model_name, prompt))

        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if model_name in self.failing_models:
            raise UpstreamEvaluationError(model_name, "simulated outage")

        combined = f"{model_name}|{prompt}|{self.seed}|{self.call_count}"
        hash_value = int(hashlib.md5(combined.encode()).hexdigest()[:8], 16)
        rng = random.Random(hash_value)

        details = [
            "The solution involves careful consideration of the constraints.",
            "This approach balances efficiency with correctness.",
            "Multiple factors need to be evaluated here.",
            "A systematic approach yields the best results.",
        ]
        detail = rng.choice(details)

        lowered = prompt.lower()
        structured = any(
            marker in lowered for marker in ["structure", "example format", "your task is to"]
        )
        if not structured:
            return f"Here's my response: {detail}"

        return (
            "## Summary\n\n"
            f"{detail}\n\n"
            "- First, identify the main point\n"
            "- Then, support it with evidence\n\n"
            "Why does this matter? Clarity helps."
        )

    def reset_count(self) -> None:
        """Reset the call counter (useful between tests)."""
        self.call_count = 0
        self.calls.clear()
