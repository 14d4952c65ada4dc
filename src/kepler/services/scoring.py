"""Rubric-based transcript scoring.

Each active rubric yields three signals in [0, 1]:

- keyword coverage: share of the rubric's keywords/phrases present
- semantic similarity: judged by an external oracle
- length fit: word count against the rubric's [min_words, max_words] range

They are blended 0.4/0.4/0.2 into a per-criterion score, weighted by the
rubric's normalized weight and summed into a 0-100 overall score.
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from kepler.config import Settings
from kepler.exceptions import NoActiveRubricsError, TranscriptValidationError
from kepler.schemas.rubric import Rubric
from kepler.schemas.scoring import CriterionScore, ScoreResult
from kepler.services.similarity import SimilarityOracle
from kepler.utils.llm_parse import clamp
from kepler.utils.text import parse_keywords, round_half_up, tokenize

logger = logging.getLogger(__name__)

KEYWORD_WEIGHT = 0.4
SIMILARITY_WEIGHT = 0.4
LENGTH_WEIGHT = 0.2

FEEDBACK_SEPARATOR = " • "


@dataclass(frozen=True)
class NormalizedRubric:
    rubric: Rubric
    weight: float


@dataclass(frozen=True)
class KeywordMatch:
    found: list[str] = field(default_factory=list)
    expected: int = 0
    score: float = 1.0


def normalize_weights(rubrics: Sequence[Rubric]) -> list[NormalizedRubric]:
    """Rescale rubric weights to sum to 1, splitting equally when all are 0.

    The caller guarantees at least one rubric.
    """
    total = sum(r.weight for r in rubrics)
    if total > 0:
        return [NormalizedRubric(r, r.weight / total) for r in rubrics]
    equal = 1.0 / len(rubrics)
    return [NormalizedRubric(r, equal) for r in rubrics]


def score_keywords(keyword_spec: str | None, tokens: Sequence[str]) -> KeywordMatch:
    """Measure how many expected keywords appear in ``tokens``.

    Multi-word phrases match as substrings of the space-joined tokens;
    single words must equal a whole token.
    """
    keywords = parse_keywords(keyword_spec)
    if not keywords:
        return KeywordMatch()

    token_set = set(tokens)
    joined = " ".join(tokens)
    found = [
        kw for kw in keywords
        if (kw in joined if " " in kw else kw in token_set)
    ]
    return KeywordMatch(found=found, expected=len(keywords), score=len(found) / len(keywords))


def score_length(min_words: int, max_words: int, total_words: int) -> float:
    if min_words <= total_words <= max_words:
        return 1.0
    if total_words < min_words:
        return max(0.0, 0.5 * total_words / max(1, min_words))
    if total_words > max_words and max_words > 0:
        return max(0.0, 0.5 * max_words / total_words)
    # max_words == 0 with words above a zero minimum
    return 0.0


def combine_signals(keyword: float, similarity: float, length: float) -> float:
    return clamp(
        KEYWORD_WEIGHT * keyword + SIMILARITY_WEIGHT * similarity + LENGTH_WEIGHT * length
    )


def build_feedback(
    match: KeywordMatch, similarity: float, rubric: Rubric, word_count: int
) -> str:
    parts: list[str] = []
    if match.expected > 0:
        if len(match.found) == match.expected:
            parts.append("✓ All keywords found")
        elif not match.found:
            parts.append("✗ No keywords found")
        else:
            parts.append(f"Partial: {len(match.found)}/{match.expected} keywords")
    parts.append(f"Semantic match: {int(round_half_up(similarity * 100, 0))}%")
    parts.append(
        f"Length: {word_count} words "
        f"(expected: {rubric.min_words}-{rubric.max_words})"
    )
    return FEEDBACK_SEPARATOR.join(parts)


class ScoringService:
    def __init__(self, oracle: SimilarityOracle, settings: Settings) -> None:
        self._oracle = oracle
        self._max_transcript_chars = settings.max_transcript_chars
        self._max_concurrency = max(1, settings.similarity_max_concurrency)

    def validate_transcript(self, transcript: object) -> str:
        if not isinstance(transcript, str) or not transcript.strip():
            raise TranscriptValidationError("Invalid transcript provided")
        if len(transcript) > self._max_transcript_chars:
            raise TranscriptValidationError(
                f"Transcript too long ({len(transcript)} chars, "
                f"max {self._max_transcript_chars})"
            )
        return transcript

    async def score(self, transcript: object, rubrics: Sequence[Rubric]) -> ScoreResult:
        """Score ``transcript`` against ``rubrics`` (kept in input order)."""
        text = self.validate_transcript(transcript)
        if not rubrics:
            raise NoActiveRubricsError("No active rubrics found")

        normalized = normalize_weights(rubrics)
        tokens = tokenize(text)
        word_count = len(tokens)
        similarities = await self._similarities(text, normalized)

        criteria: list[CriterionScore] = []
        total_weighted = 0.0
        for item, similarity in zip(normalized, similarities):
            rubric = item.rubric
            match = score_keywords(rubric.keywords, tokens)
            length = score_length(rubric.min_words, rubric.max_words, word_count)
            combined = combine_signals(match.score, similarity, length)
            weighted = combined * item.weight
            total_weighted += weighted

            criteria.append(
                CriterionScore(
                    name=rubric.criterion_name,
                    description=rubric.criterion_description,
                    weight=item.weight,
                    keyword_score=round_half_up(match.score, 3),
                    keywords_found=match.found,
                    similarity_score=round_half_up(similarity, 3),
                    length_score=round_half_up(length, 3),
                    combined_score=round_half_up(combined, 3),
                    weighted_score=round_half_up(weighted, 4),
                    feedback=build_feedback(match, similarity, rubric, word_count),
                )
            )

        overall = clamp(total_weighted * 100, 0.0, 100.0)
        result = ScoreResult(
            overall_score=round_half_up(overall, 2),
            word_count=word_count,
            criteria=criteria,
        )
        logger.info(
            "Scored transcript: %d words, %d rubrics, overall=%.2f",
            word_count,
            len(criteria),
            result.overall_score,
        )
        return result

    async def _similarities(
        self, transcript: str, normalized: Sequence[NormalizedRubric]
    ) -> list[float]:
        """One oracle call per rubric; results follow rubric order."""
        descriptions = [item.rubric.criterion_description for item in normalized]
        if self._max_concurrency == 1:
            return [
                await self._oracle.similarity(transcript, description)
                for description in descriptions
            ]

        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _bounded(description: str) -> float:
            async with semaphore:
                return await self._oracle.similarity(transcript, description)

        return list(await asyncio.gather(*(_bounded(d) for d in descriptions)))
