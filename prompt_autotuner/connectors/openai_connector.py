"""OpenAI connector for prompt completion."""

import logging

from openai import AsyncOpenAI, OpenAIError

from prompt_autotuner.connectors.base import BaseConnector, CompletionParams
from prompt_autotuner.errors import UpstreamEvaluationError

logger = logging.getLogger(__name__)


class OpenAIConnector(BaseConnector):
    """Connector for completing prompts with OpenAI (or OpenAI-compatible) models."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model_aliases: dict[str, str] | None = None,
        default_temperature: float = 0.7,
    ):
        """Initialize OpenAI connector.

        Args:
            api_key: OpenAI API key (if None, the client reads OPENAI_API_KEY)
            base_url: Optional base URL of an OpenAI-compatible gateway
            model_aliases: Maps configured model names to provider model ids,
                e.g. {"claude-3-haiku": "claude-3-haiku-20240307"}
            default_temperature: Temperature used when params leave it unset
        """
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self.model_aliases = model_aliases or {}
        self.default_temperature = default_temperature
        logger.info(f"OpenAIConnector initialized with {len(self.model_aliases)} model aliases")

    async def complete(
        self, model_name: str, prompt: str, params: CompletionParams | None = None
    ) -> str:
        """Complete via OpenAI chat completions API (async).

        Args:
            model_name: Configured model name (resolved through model_aliases)
            prompt: User message
            params: Optional sampling parameters

        Returns:
            Model response

        Raises:
            UpstreamEvaluationError: If the API call fails
        """
        params = params or CompletionParams()
        model = self.model_aliases.get(model_name, model_name)

        messages = []
        if params.system_prompt:
            messages.append({"role": "system", "content": params.system_prompt})
        messages.append({"role": "user", "content": prompt})

        request: dict = {
            "model": model,
            "messages": messages,
            "temperature": (
                params.temperature if params.temperature is not None else self.default_temperature
            ),
        }
        if params.max_tokens is not None:
            request["max_tokens"] = params.max_tokens

        try:
            response = await self.client.chat.completions.with_raw_response.create(**request)
            completion = response.parse()
            return completion.choices[0].message.content or ""
        except OpenAIError as e:
            logger.error(f"OpenAI API call failed for {model}: {e}")
            raise UpstreamEvaluationError(model_name, str(e)) from e
