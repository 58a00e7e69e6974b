"""Primary optimizer: asks an LLM to rewrite a prompt."""

import logging
import re

from pydantic import BaseModel, Field

from prompt_autotuner.config import LLMConfig
from prompt_autotuner.connectors import BaseConnector, CompletionParams
from prompt_autotuner.types import Change

logger = logging.getLogger(__name__)

JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class RewriteOutput(BaseModel):
    """Output structure expected from the rewriting LLM."""

    optimized_prompt: str = Field(min_length=1, description="The improved prompt text")
    explanation: str = Field(description="Why the changes improve the prompt")
    changes: list[Change] = Field(default_factory=list)


def build_rewriter_instructions() -> str:
    """System prompt for the rewriting LLM."""
    return """You are a prompt optimization specialist who surgically improves prompts.

**YOUR JOB**:
Rewrite the prompt you are given so that a language model following it produces
responses that are:

1. **Grounded**: no unsupported claims, uncertainty stated plainly
2. **Structured**: organized with paragraphs, lists or headings where they help
3. **Consistent**: the same request yields the same kind of answer every time

**RULES**:
- Preserve the original intent and every hard requirement
- Prefer targeted edits over a full rewrite
- Do not make the prompt unnecessarily verbose

**OUTPUT FORMAT**:
Respond with a single JSON object and nothing else:
{
  "optimized_prompt": "<the improved prompt>",
  "explanation": "<why these changes improve the prompt>",
  "changes": [
    {"type": "addition|modification|deletion", "description": "<what and why>",
     "original": "<optional original text>", "optimized": "<optional new text>"}
  ]
}
"""


def parse_rewrite_output(text: str) -> RewriteOutput:
    """
    Extract the JSON rewrite from an LLM response.

    Args:
        text: Raw LLM response, possibly wrapped in prose or code fences

    Returns:
        Parsed rewrite

    Raises:
        ValueError: If no valid JSON object is found
    """
    match = JSON_OBJECT.search(text)
    if not match:
        raise ValueError("Rewriter response contains no JSON object")
    return RewriteOutput.model_validate_json(match.group(0))


class PromptRewriter:
    """Rewrites prompts with the configured optimizer LLM."""

    def __init__(self, connector: BaseConnector, llm_config: LLMConfig):
        """
        Initialize the rewriter.

        Args:
            connector: Completion transport
            llm_config: Model and sampling settings of the optimizer LLM
        """
        self.connector = connector
        self.llm_config = llm_config

    async def rewrite(self, prompt: str) -> RewriteOutput:
        """
        Ask the optimizer LLM for an improved version of a prompt.

        Args:
            prompt: Prompt to improve

        Returns:
            The rewrite with its explanation and change-set

        Raises:
            ValueError: If the LLM response cannot be parsed
        """
        params = CompletionParams(
            system_prompt=build_rewriter_instructions(),
            temperature=self.llm_config.temperature,
            max_tokens=self.llm_config.max_tokens,
        )
        logger.debug(f"Requesting rewrite from {self.llm_config.model}")
        response = await self.connector.complete(
            self.llm_config.model, f"Optimize this prompt:\n\n{prompt}", params
        )
        output = parse_rewrite_output(response)
        logger.info(f"Rewriter proposed {len(output.changes)} changes")
        return output
