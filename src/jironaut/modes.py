"""
Mode classification (deterministic).

Purpose:
- Decide from the raw user input which kind of request this is:
  drafting a ticket from a brief, scoring an existing ticket, or anything else.
- Strip the mode prefix so the remaining text can be sent (and cached) as-is.

Detection is a plain case-insensitive prefix match on the trimmed input.
There is no other detection mechanism: no keyword sniffing, no LLM routing.
"""
from __future__ import annotations

from enum import Enum
from typing import Tuple


class Mode(str, Enum):
    DRAFT = "draft"
    SCORE = "score"
    UNSUPPORTED = "unsupported"


# Both prefixes are 6 characters long; the slice below relies on the prefix text itself.
_PREFIXES = {
    "draft:": Mode.DRAFT,
    "score:": Mode.SCORE,
}


def classify(raw_input: str) -> Tuple[Mode, str]:
    """
    Returns (mode, cleaned_input).
    - "draft: ..." / "score: ..." (any case) -> prefix removed, remainder trimmed
    - anything else (including "") -> UNSUPPORTED, trimmed input unchanged
    """
    text = raw_input.strip()
    lowered = text.lower()
    for prefix, mode in _PREFIXES.items():
        if lowered.startswith(prefix):
            return mode, text[len(prefix):].strip()
    return Mode.UNSUPPORTED, text
