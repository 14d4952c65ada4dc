"""Semantic similarity judged by an external LLM.

Every failure (transport error, non-2xx status, unparsable or non-numeric
reply) degrades to a fixed neutral score instead of raising, so one bad
call never aborts a scoring run.
"""

import logging
from typing import Protocol

from kepler.config import Settings
from kepler.services.llm import LLMClient
from kepler.utils.llm_parse import clamp, parse_score

logger = logging.getLogger(__name__)

_SIMILARITY_SYSTEM_PROMPT = (
    "You are a semantic similarity analyzer. Rate how well the transcript "
    "matches the criterion description on a scale of 0.0 to 1.0. "
    "Respond ONLY with a number between 0.0 and 1.0, nothing else."
)


class SimilarityOracle(Protocol):
    async def similarity(self, transcript: str, description: str) -> float: ...


class SimilarityService:
    def __init__(self, client: LLMClient, settings: Settings) -> None:
        self._client = client
        self._fallback = settings.similarity_fallback_score

    async def similarity(self, transcript: str, description: str) -> float:
        """Return how well ``transcript`` matches ``description``, in [0, 1]."""
        messages = [
            {"role": "system", "content": _SIMILARITY_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": (
                    f'Criterion: "{description}"\n\n'
                    f'Transcript: "{transcript}"\n\n'
                    "Similarity score (0.0-1.0):"
                ),
            },
        ]
        try:
            response = await self._client.chat(messages)
            score = parse_score(response.content)
        except Exception as e:
            logger.warning("Similarity request failed, using fallback %.2f: %s", self._fallback, e)
            return self._fallback

        if score is None:
            logger.warning(
                "Unparsable similarity reply, using fallback %.2f: %r",
                self._fallback,
                response.content[:100],
            )
            return self._fallback
        return clamp(score)
