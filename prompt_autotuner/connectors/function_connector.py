"""Function-based connector for in-process completion."""

import inspect
import logging
from collections.abc import Awaitable, Callable

from prompt_autotuner.connectors.base import BaseConnector, CompletionParams

logger = logging.getLogger(__name__)

CompletionFunc = Callable[[str, str, CompletionParams], str | Awaitable[str]]


class FunctionConnector(BaseConnector):
    """Connector that delegates completion to a Python function."""

    def __init__(self, func: CompletionFunc):
        """
        Initialize with a callable function.

        Args:
            func: Function (sync or async) taking
                (model_name: str, prompt: str, params: CompletionParams) -> response: str
        """
        self.func = func
        logger.info("FunctionConnector initialized")

    async def complete(
        self, model_name: str, prompt: str, params: CompletionParams | None = None
    ) -> str:
        """Complete via function call."""
        result = self.func(model_name, prompt, params or CompletionParams())
        if inspect.isawaitable(result):
            result = await result
        return result
