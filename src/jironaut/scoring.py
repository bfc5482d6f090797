"""
Rubric scorer (deterministic backstop).

Purpose:
- Recompute the total percentage and the badge from the per-criterion scores
  returned by the model, so what we show never depends on the model's arithmetic.
- Keep the rubric and badge thresholds in one place: the scoring prompt is
  generated from the same constants, so model and scorer agree on the rules.

Badge semantics:
- Rules are evaluated in a fixed order and every match OVERWRITES the previous
  badge. The last matching rule wins; this is not a "best badge" ranking.
"""
from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Tuple

from jironaut.schema import ScoreResult

TITLE = "Title clarity"
DESCRIPTION = "Description completeness"
BENEFIT = "Benefit Hypothesis"
INDICATORS = "Leading Indicators"
ALIGNMENT = "Strategic alignment"
RISK = "Risk/Impact"
DEPENDENCIES = "Dependencies"
SCOPE = "Scope clarity"

# Criterion -> max points. Order matters for prompt rendering.
RUBRIC: Dict[str, int] = {
    TITLE: 10,
    DESCRIPTION: 15,
    BENEFIT: 20,
    INDICATORS: 15,
    ALIGNMENT: 10,
    RISK: 10,
    DEPENDENCIES: 10,
    SCOPE: 10,
}

TOTAL_POINTS = 100

VISIONARY_THINKER = "Visionary Thinker"
FEATURE_ARCHITECT = "Feature Architect"
CLARITY_CHAMPION = "Clarity Champion"
RISK_WRANGLER = "Risk Wrangler"

# (label, criteria summed, threshold); None as criteria means "the total percentage".
BadgeRule = Tuple[str, Optional[Tuple[str, ...]], int]

BADGE_RULES: List[BadgeRule] = [
    (VISIONARY_THINKER, (BENEFIT, ALIGNMENT, INDICATORS), 40),
    (FEATURE_ARCHITECT, None, 85),
    (CLARITY_CHAMPION, (TITLE, DESCRIPTION, SCOPE), 30),
    (RISK_WRANGLER, (RISK, DEPENDENCIES), 15),
]


def _subtotal(scores: Mapping[str, float], criteria: Tuple[str, ...]) -> float:
    return sum(scores.get(c, 0) for c in criteria)


def badge_max(criteria: Optional[Tuple[str, ...]]) -> int:
    """Max points reachable by a rule (used to phrase thresholds as "40/45")."""
    if criteria is None:
        return TOTAL_POINTS
    return sum(RUBRIC[c] for c in criteria)


def score(scores: Mapping[str, float]) -> ScoreResult:
    """
    Compute {total, badge} from per-criterion points.

    - total: sum of every value in `scores`, as a rounded percentage of 100 points
    - missing criteria count as 0
    - never raises for a mapping of numbers
    """
    obtained = sum(scores.values())
    total = int(round(obtained / TOTAL_POINTS * 100))

    badge: Optional[str] = None
    for label, criteria, threshold in BADGE_RULES:
        value = total if criteria is None else _subtotal(scores, criteria)
        if value >= threshold:
            badge = label

    return ScoreResult(total=total, badge=badge)
