"""
Assistant message renderer (deterministic).

Purpose:
- Turn the assistant text returned by Assistant.submit into something readable in a terminal.
- Scoring reports get a header line with the total (colored by band) and the badge,
  followed by the pretty-printed JSON; anything that is not a JSON object is shown as-is.

This step performs no network calls and never changes the stored/cached text.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

_ANSI = {
    "green": "\033[32m",
    "orange": "\033[33m",
    "red": "\033[31m",
}
_RESET = "\033[0m"


def score_color(total: Any) -> str:
    # Bands: >=85 green, >=70 orange, below (or not a number) red.
    if isinstance(total, (int, float)) and not isinstance(total, bool):
        if total >= 85:
            return "green"
        if total >= 70:
            return "orange"
    return "red"


def _parse_object(text: str) -> Optional[Dict[str, Any]]:
    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None
    return parsed if isinstance(parsed, dict) else None


def render_assistant_message(text: str, color: bool = False) -> str:
    parsed = _parse_object(text)
    if parsed is None:
        return text

    lines: List[str] = []
    if "total" in parsed:
        total = parsed["total"]
        header = f"🏆 Total Score: {total}%"
        if color:
            header = f"{_ANSI[score_color(total)]}{header}{_RESET}"
        lines.append(header)
    if "badge" in parsed:
        lines.append(f"Badge: {parsed['badge']}")
    lines.append(json.dumps(parsed, indent=2, ensure_ascii=False))
    return "\n".join(lines)
