"""Wall-clock budgets for asynchronous operations."""

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from prompt_autotuner.errors import BudgetExceeded

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _discard_outcome(task: asyncio.Future) -> None:
    """Consume the outcome of a task whose race was lost."""
    if not task.cancelled() and task.exception() is not None:
        logger.debug(f"Discarded late failure: {task.exception()!r}")


async def run_with_budget(operation: Awaitable[T], budget_seconds: float, name: str) -> T:
    """
    Race an operation against a timer and return its result if it wins.

    When the timer wins the operation is cancelled and whatever it eventually
    produces is discarded, so nothing it does later reaches the caller.

    Args:
        operation: Coroutine or future to run
        budget_seconds: Wall-clock budget in seconds
        name: Operation name used in logs and the raised error

    Returns:
        The operation's result

    Raises:
        BudgetExceeded: If the budget elapses first
    """
    task = asyncio.ensure_future(operation)
    try:
        done, _ = await asyncio.wait({task}, timeout=budget_seconds)
    except asyncio.CancelledError:
        task.cancel()
        raise

    if task in done:
        return task.result()

    task.cancel()
    task.add_done_callback(_discard_outcome)
    logger.warning(f"{name} exceeded budget of {budget_seconds:g}s, taking fallback path")
    raise BudgetExceeded(name, budget_seconds)
