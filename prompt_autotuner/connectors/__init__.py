"""Connectors to the language models that complete prompts."""

from prompt_autotuner.connectors.base import BaseConnector, CompletionParams
from prompt_autotuner.connectors.function_connector import FunctionConnector
from prompt_autotuner.connectors.openai_connector import OpenAIConnector

__all__ = [
    "BaseConnector",
    "CompletionParams",
    "FunctionConnector",
    "OpenAIConnector",
]
