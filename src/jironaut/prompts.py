"""
Prompt builder.

Purpose:
- Map a Mode to the (system instruction, task instruction) pair sent with the request.
- Keep the policy layer in the system prompt (scope, refusal, structured output)
  and the per-request contract in the task instruction.

Notes:
- The scoring rubric and badge thresholds are rendered from jironaut.scoring so
  the numbers the model sees are the numbers the deterministic scorer applies.
- UNSUPPORTED requests still go upstream with a refusal framing; the model writes
  the refusal.
"""
from __future__ import annotations

from typing import Tuple

from jironaut.modes import Mode
from jironaut.scoring import (
    ALIGNMENT,
    BADGE_RULES,
    BENEFIT,
    DEPENDENCIES,
    DESCRIPTION,
    INDICATORS,
    RISK,
    RUBRIC,
    SCOPE,
    TITLE,
    badge_max,
)

# Policy layer shared by every mode.
SYSTEM_PROMPT = (
    "You are Jironaut, a Jira co-pilot. You ONLY help with writing, scoring, and improving "
    "Jira tickets. You never answer unrelated questions. Always respond in a structured way: "
    "either as a draft Jira ticket or as a scoring report."
)

# Field names are the JSON keys the renderer and downstream users expect.
DRAFT_PROMPT = """Draft a Jira ticket from the following brief.
Return JSON with:
- title (<=80 chars, action + context)
- description_markdown (with sections: Why, What, Constraints)
- acceptance_criteria (4-8 Gherkin-style items: Given/When/Then)
- labels (<=5, kebab-case)
Rules:
- If details are missing, add a "Questions" section at the end.
- Include risk_notes, qa_checks, and assumptions if relevant.
- Keep tone clear, concise, and Jira-ready.
"""

SCORE_PROMPT = "Evaluate the following Jira ticket:"

UNSUPPORTED_PROMPT = "Only Jira-related drafting and scoring tasks are supported."

_BADGE_HINTS = {
    (BENEFIT, ALIGNMENT, INDICATORS): "Benefit+Alignment+Indicators",
    (TITLE, DESCRIPTION, SCOPE): "Title+Description+Scope",
    (RISK, DEPENDENCIES): "Risk+Dependencies",
}


def _rubric_lines() -> str:
    return ", ".join(f"{name} ({points})" for name, points in RUBRIC.items())


def _badge_lines() -> str:
    lines = []
    for label, criteria, threshold in BADGE_RULES:
        if criteria is None:
            lines.append(f"- {label}: Total >= {threshold}%")
        else:
            hint = _BADGE_HINTS.get(criteria, "+".join(criteria))
            lines.append(f"- {label}: {hint} >= {threshold}/{badge_max(criteria)}")
    return "\n".join(lines)


def scoring_system_prompt() -> str:
    """Base system prompt extended with the rubric and the badge thresholds."""
    return f"""{SYSTEM_PROMPT}
You are Jironaut, a Jira ticket reviewer.
Score tickets against {len(RUBRIC)} criteria (total 100 points):
- {_rubric_lines()}.
Return JSON with: scores (an object mapping each criterion name to its points), total %,
one badge, one positive note, one area to improve, and ask if the user wants a rewrite.
Badges:
{_badge_lines()}
"""


def build_prompts(mode: Mode) -> Tuple[str, str]:
    """
    Returns (system_instruction, task_instruction) for a mode. Never fails.
    """
    if mode is Mode.DRAFT:
        return SYSTEM_PROMPT, DRAFT_PROMPT
    if mode is Mode.SCORE:
        return scoring_system_prompt(), SCORE_PROMPT
    return SYSTEM_PROMPT, UNSUPPORTED_PROMPT


def build_user_content(task_instruction: str, cleaned_input: str) -> str:
    # Task instruction and payload separated by a blank line.
    return f"{task_instruction}\n\n{cleaned_input}"
