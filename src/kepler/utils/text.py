import math
import re

# Word characters plus apostrophes, anchored on word boundaries so that
# "don't" stays one token while leading/trailing quotes are dropped.
_TOKEN_RE = re.compile(r"\b[\w']+\b")
_KEYWORD_SEP_RE = re.compile(r"[,;]")


def tokenize(text: str) -> list[str]:
    """Lower-case ``text`` and split it into word tokens.

    Punctuation and whitespace act as separators; internal apostrophes are
    kept (``"don't"`` -> ``["don't"]``).
    """
    return _TOKEN_RE.findall(text.lower())


def parse_keywords(spec: str | None) -> list[str]:
    """Split a ``,``/``;`` delimited keyword spec into lower-cased entries.

    Empty entries are dropped; order and duplicates are preserved.
    """
    if not spec:
        return []
    keywords = (k.strip().lower() for k in _KEYWORD_SEP_RE.split(spec))
    return [k for k in keywords if k]


def round_half_up(value: float, digits: int) -> float:
    """Round ``value`` to ``digits`` decimals, halves rounding up."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor
