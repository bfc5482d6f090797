"""
Response assembler (orchestrator).

This module wires together one request end-to-end:
1) Classify the raw input into a mode and strip the prefix (deterministic)
2) Build the system + task instructions for that mode
3) Check the result cache (draft/score only): a hit costs no API call
4) Call the completion API through the resilient client
5) If the reply is a JSON object with `scores`, recompute total/badge deterministically,
   re-serialize and cache it
6) Turn any upstream failure into a readable assistant message

The caller (UI) gets a plain string back in every case and never sees an exception
from the API layer.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from jironaut.cache import ResultCache
from jironaut.llm import BillingExceededError, ResilientCompletionClient, is_rate_limited
from jironaut.modes import Mode, classify
from jironaut.prompts import build_prompts, build_user_content
from jironaut.schema import ConversationMessage, ScoringReport
from jironaut.scoring import score

logger = logging.getLogger("jironaut.assistant")

BILLING_MESSAGE = "⚠️ OpenAI says your quota is exceeded. Add a payment method or top up credits."
RATE_LIMIT_MESSAGE = "⚠️ We're sending requests too quickly. Please wait a moment and try again."
GENERIC_ERROR_MESSAGE = "⚠️ Something went wrong while contacting OpenAI. Please try again."

# Only these modes read or write the cache.
CACHED_MODES = (Mode.DRAFT, Mode.SCORE)

HistoryItem = Union[ConversationMessage, Mapping[str, Any]]


class RequestInFlightError(RuntimeError):
    """Raised when submit() is called while a previous submission is still running."""


def build_messages(
    system_instruction: str,
    history: Sequence[HistoryItem],
    user_content: str,
) -> List[Dict[str, str]]:
    """
    System message first (rebuilt every request), then the prior history without any
    system turns, then the new user message.
    """
    messages = [{"role": "system", "content": system_instruction}]
    for item in history:
        msg = item if isinstance(item, ConversationMessage) else ConversationMessage.model_validate(item)
        if msg.role == "system":
            continue
        messages.append(msg.model_dump())
    messages.append({"role": "user", "content": user_content})
    return messages


def apply_scores(text: str) -> Optional[str]:
    """
    If `text` is a JSON object with a valid `scores` mapping, overwrite total/badge with
    the deterministic scorer's result and return the re-serialized object.
    Returns None when the reply should be passed through untouched.
    """
    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None
    if not isinstance(parsed, dict) or "scores" not in parsed:
        return None
    try:
        report = ScoringReport.model_validate(parsed)
    except ValidationError as e:
        logger.warning("scores_invalid errors=%d; returning raw reply", e.error_count())
        return None

    result = score(report.scores)
    parsed["total"] = result.total
    parsed["badge"] = result.badge
    return json.dumps(parsed, ensure_ascii=False)


def user_turn(raw_input: str) -> ConversationMessage:
    """
    The user message exactly as it is sent upstream (task instruction + cleaned input).
    This is what belongs in the conversation history, not the raw line.
    """
    mode, cleaned = classify(raw_input)
    _, task_instruction = build_prompts(mode)
    return ConversationMessage(role="user", content=build_user_content(task_instruction, cleaned))


def failure_message(err: BaseException) -> str:
    if isinstance(err, BillingExceededError):
        return BILLING_MESSAGE
    if is_rate_limited(err):
        return RATE_LIMIT_MESSAGE
    return GENERIC_ERROR_MESSAGE


class Assistant:
    """
    Entry point for the UI: one submit() per user turn, one at a time.
    """

    def __init__(
        self,
        completion: ResilientCompletionClient,
        cache: ResultCache,
        model: str,
    ) -> None:
        self.completion = completion
        self.cache = cache
        self.model = model
        self._in_flight = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._in_flight.locked()

    async def submit(self, raw_input: str, history: Sequence[HistoryItem] = ()) -> str:
        if self._in_flight.locked():
            raise RequestInFlightError("A request is already in progress.")
        async with self._in_flight:
            return await self._handle(raw_input, history)

    async def _handle(self, raw_input: str, history: Sequence[HistoryItem]) -> str:
        mode, cleaned = classify(raw_input)
        system_instruction, _ = build_prompts(mode)
        messages = build_messages(system_instruction, history, user_turn(raw_input).content)

        use_cache = mode in CACHED_MODES
        if use_cache:
            cached = self.cache.get(cleaned)
            if cached is not None:
                logger.info("submit mode=%s cache=hit", mode.value)
                return cached

        payload = {
            "model": self.model,
            "messages": messages,
            "response_format": {"type": "json_object"},
            "temperature": 0,
        }

        try:
            reply = await self.completion.complete(payload)
        except Exception as e:
            logger.exception("submit mode=%s failed", mode.value)
            return failure_message(e)

        final = apply_scores(reply)
        if final is None:
            logger.info("submit mode=%s cache=miss scored=false", mode.value)
            return reply

        if use_cache:
            self.cache.put(cleaned, final)
        logger.info("submit mode=%s cache=miss scored=true", mode.value)
        return final
