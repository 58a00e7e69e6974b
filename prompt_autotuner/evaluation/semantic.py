"""Optional semantic scoring of prompt/response pairs."""

import logging
import math
from typing import Protocol

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)

MIN_QUALITY_IMPROVEMENT = -100.0
MAX_QUALITY_IMPROVEMENT = 300.0


class SemanticScorer(Protocol):
    """Protocol for services that compare two prompt/response pairs."""

    async def quality_improvement(
        self,
        original_prompt: str,
        original_response: str,
        optimized_prompt: str,
        optimized_response: str,
    ) -> float:
        """Return the percentage quality improvement of the optimized pair."""
        ...


def cosine_similarity(first: list[float], second: list[float]) -> float:
    """Cosine similarity of two vectors (0 if either has zero length)."""
    dot = sum(a * b for a, b in zip(first, second))
    norm = math.sqrt(sum(a * a for a in first)) * math.sqrt(sum(b * b for b in second))
    return dot / norm if norm else 0.0


def _percent_change(before: float, after: float) -> float:
    if before == 0:
        return 0.0
    return (after - before) / abs(before) * 100


class EmbeddingSemanticScorer:
    """Semantic scorer backed by OpenAI embeddings.

    Relevance is the similarity of a response to its prompt. Coherence is the
    similarity of a response to its own opening sentence, a proxy for staying
    on topic. The quality improvement is the mean of the relative changes of
    both, clamped to [-100, 300].
    """

    def __init__(self, api_key: str | None = None, model: str = "text-embedding-3-small"):
        """
        Initialize the scorer.

        Args:
            api_key: OpenAI API key (if None, the client reads OPENAI_API_KEY)
            model: Embedding model name
        """
        self.client = AsyncOpenAI(api_key=api_key)
        self.model = model

    async def quality_improvement(
        self,
        original_prompt: str,
        original_response: str,
        optimized_prompt: str,
        optimized_response: str,
    ) -> float:
        texts = [
            original_prompt,
            original_response,
            _opening(original_response),
            optimized_prompt,
            optimized_response,
            _opening(optimized_response),
        ]
        response = await self.client.embeddings.create(
            model=self.model, input=[text or " " for text in texts]
        )
        vectors = [item.embedding for item in sorted(response.data, key=lambda d: d.index)]

        original_relevance = cosine_similarity(vectors[0], vectors[1])
        original_coherence = cosine_similarity(vectors[1], vectors[2])
        optimized_relevance = cosine_similarity(vectors[3], vectors[4])
        optimized_coherence = cosine_similarity(vectors[4], vectors[5])

        improvement = (
            _percent_change(original_relevance, optimized_relevance)
            + _percent_change(original_coherence, optimized_coherence)
        ) / 2
        logger.info(f"Semantic quality improvement: {improvement:.1f}%")
        return max(MIN_QUALITY_IMPROVEMENT, min(MAX_QUALITY_IMPROVEMENT, improvement))


def _opening(text: str) -> str:
    """First sentence of a text, or the text itself."""
    head = text.strip().split(".", 1)[0].strip()
    return head or text
