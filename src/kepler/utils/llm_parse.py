"""LLM output parsing utilities.

Shared helpers for stripping think tags and extracting a numeric score
from LLM responses.
"""

import re

_THINK_PAIR_RE = re.compile(r"<think>.*?</think>", re.DOTALL)
_THINK_OPEN_RE = re.compile(r"<think>.*", re.DOTALL)
_THINK_CLOSE_RE = re.compile(r"^.*?</think>", re.DOTALL)

# Leading decimal number or Infinity, same acceptance as JavaScript's parseFloat
_LEADING_NUMBER_RE = re.compile(
    r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)


def strip_think_tags(text: str) -> str:
    """Remove <think>...</think> tags from LLM output."""
    text = _THINK_PAIR_RE.sub("", text)
    text = _THINK_OPEN_RE.sub("", text)
    text = _THINK_CLOSE_RE.sub("", text)
    return text


def parse_score(text: str | None) -> float | None:
    """Parse the leading number of an LLM reply.

    Think tags, markdown fences and surrounding whitespace are ignored.
    Infinities (``"Infinity"``, ``"1e999"``) are returned as ``float("inf")``
    for the caller to clamp. Returns ``None`` when no number can be read.
    """
    if not text:
        return None
    text = strip_think_tags(text)
    text = text.replace("```", "").strip()
    match = _LEADING_NUMBER_RE.match(text)
    if match is None:
        return None
    return float(match.group(0))


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))
