"""
Data contracts shared by the assistant pipeline.

Purpose:
- Describe the conversation messages exchanged with the completion API.
- Validate the part of the model's scoring report that deterministic code relies on
  (the per-criterion `scores`) before it is fed to the rubric scorer.
- Define the derived score result (total + badge).

Design principles:
- Only validate what downstream code consumes; everything else the model returns
  (notes, rewrite offer, draft fields) passes through untouched.
- Validation via Pydantic before any downstream use.
"""
from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Optional, Literal

Role = Literal["system", "user", "assistant"]


# One turn of the conversation. The system message is rebuilt for every request
# and is never kept in the history.
class ConversationMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


# Derived from a RubricScores mapping; recomputed every time, never stored on its own.
class ScoreResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: int = Field(..., description="Rounded percentage of the 100 rubric points.")
    badge: Optional[str] = Field(None, description="Last matching badge label, or None.")


# Scoring report as returned by the model. Extra fields are kept so the reply can be
# re-serialized with only total/badge overwritten.
class ScoringReport(BaseModel):
    model_config = ConfigDict(extra="allow")

    # Decimal points are accepted and rounded by the scorer; non-numeric values fail validation.
    scores: Dict[str, float] = Field(..., description="Criterion name -> points awarded.")
