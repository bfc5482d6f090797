"""Unit tests for the prompt builder."""

from __future__ import annotations

import pytest

from jironaut.modes import Mode
from jironaut.prompts import (
    DRAFT_PROMPT,
    SCORE_PROMPT,
    SYSTEM_PROMPT,
    UNSUPPORTED_PROMPT,
    build_prompts,
    build_user_content,
)
from jironaut.scoring import BADGE_RULES, RUBRIC


@pytest.mark.unit
class TestBuildPrompts:
    def test_draft(self):
        system, task = build_prompts(Mode.DRAFT)
        assert system == SYSTEM_PROMPT
        assert task == DRAFT_PROMPT
        for field in ("title", "description_markdown", "acceptance_criteria", "labels"):
            assert field in task
        assert "Why, What, Constraints" in task
        assert "Questions" in task

    def test_unsupported_still_has_a_task(self):
        system, task = build_prompts(Mode.UNSUPPORTED)
        assert system == SYSTEM_PROMPT
        assert task == UNSUPPORTED_PROMPT

    def test_score_extends_the_base_system_prompt(self):
        system, task = build_prompts(Mode.SCORE)
        assert system.startswith(SYSTEM_PROMPT)
        assert task == SCORE_PROMPT

    def test_score_prompt_lists_every_criterion_with_its_max(self):
        system, _ = build_prompts(Mode.SCORE)
        for name, points in RUBRIC.items():
            assert f"{name} ({points})" in system

    def test_score_prompt_states_badge_thresholds(self):
        system, _ = build_prompts(Mode.SCORE)
        assert "Visionary Thinker: Benefit+Alignment+Indicators >= 40/45" in system
        assert "Feature Architect: Total >= 85%" in system
        assert "Clarity Champion: Title+Description+Scope >= 30/35" in system
        assert "Risk Wrangler: Risk+Dependencies >= 15/20" in system
        for label, _, _ in BADGE_RULES:
            assert label in system


@pytest.mark.unit
def test_user_content_is_separated_by_blank_line():
    assert build_user_content("Evaluate:", "ticket body") == "Evaluate:\n\nticket body"
