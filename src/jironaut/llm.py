"""
LLM client utilities.

Purpose:
- Centralize all interactions with the completion API (OpenAI-compatible).
- Wrap the chat completion call in a bounded retry policy: exponential backoff on
  rate limits, no retry on quota/billing problems, everything else propagated.
- Add observability (latency + token usage) for cost/debugging.

Design choices:
- The client is built once from Settings and injected; nothing here reads globals.
- Backoff waits are awaited (asyncio.sleep), so the event loop stays responsive.
- Unjittered doubling: base_delay_ms, 2x, 4x, ... between attempts.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx
from openai import AsyncOpenAI

from jironaut.config import Settings

# Dedicated logger namespace so LLM telemetry can be filtered independently from the rest of the app logs.
logger = logging.getLogger("jironaut.llm")

# Substring the API puts in insufficient-quota errors.
BILLING_PHRASE = "check your plan and billing"

RATE_LIMIT_STATUS = 429


class BillingExceededError(RuntimeError):
    """Quota/billing exhausted upstream. Never retried."""


def get_client(settings: Settings, http_client: Optional[httpx.AsyncClient] = None) -> AsyncOpenAI:
    # base_url is optional: None means the public OpenAI endpoint.
    # max_retries=0: ResilientCompletionClient owns the retry policy, one HTTP call per attempt.
    return AsyncOpenAI(
        api_key=settings.api_key,
        base_url=settings.base_url,
        max_retries=0,
        http_client=http_client,
    )


def _safe_usage_dict(usage: Any) -> Optional[Dict[str, int]]:
    """
    Try to normalize usage object to dict with ints.
    Works with OpenAI python types and dict-like.
    """
    if usage is None:
        return None
    for attr in ("prompt_tokens", "completion_tokens", "total_tokens"):
        if not hasattr(usage, attr):
            break
    else:
        return {
            "prompt_tokens": int(getattr(usage, "prompt_tokens") or 0),
            "completion_tokens": int(getattr(usage, "completion_tokens") or 0),
            "total_tokens": int(getattr(usage, "total_tokens") or 0),
        }

    if isinstance(usage, dict):
        try:
            return {
                "prompt_tokens": int(usage.get("prompt_tokens", 0)),
                "completion_tokens": int(usage.get("completion_tokens", 0)),
                "total_tokens": int(usage.get("total_tokens", 0)),
            }
        except (TypeError, ValueError):
            return None

    return None


def is_billing_error(err: BaseException) -> bool:
    return BILLING_PHRASE in str(err)


def is_rate_limited(err: BaseException) -> bool:
    # openai.APIStatusError exposes status_code; other clients use status.
    status = getattr(err, "status_code", None)
    if status is None:
        status = getattr(err, "status", None)
    return status == RATE_LIMIT_STATUS


class ResilientCompletionClient:
    """
    Chat completion with bounded retry.

    Attempts run for attempt = 0..retries (so at most retries + 1 calls):
    - success -> message content returned
    - billing/quota failure -> BillingExceededError, no further attempts
    - 429 with attempts left -> wait base_delay_ms * 2**attempt, try again
    - anything else (or 429 on the last attempt) -> original error re-raised
    """

    def __init__(
        self,
        client: Any,
        *,
        retries: int = 3,
        base_delay_ms: int = 800,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.client = client
        self.retries = retries
        self.base_delay_ms = base_delay_ms
        self._sleep = sleep

    async def _create(self, payload: Dict[str, Any], attempt: int) -> str:
        # High-resolution timer to measure gateway + model latency.
        t0 = time.perf_counter()
        resp = await self.client.chat.completions.create(**payload)
        dt_ms = (time.perf_counter() - t0) * 1000.0

        logger.info(
            "llm_call model=%s attempt=%d latency_ms=%.1f usage=%s",
            payload.get("model"),
            attempt,
            dt_ms,
            _safe_usage_dict(getattr(resp, "usage", None)),
        )
        return resp.choices[0].message.content or ""

    async def complete(self, payload: Dict[str, Any]) -> str:
        for attempt in range(self.retries + 1):
            try:
                return await self._create(payload, attempt)
            except Exception as e:
                if is_billing_error(e):
                    logger.error("llm_billing_exceeded attempt=%d: %s", attempt, e)
                    raise BillingExceededError(
                        "OpenAI: quota/billing exceeded. Add billing to your account."
                    ) from e
                if is_rate_limited(e) and attempt < self.retries:
                    delay_ms = self.base_delay_ms * (2 ** attempt)
                    logger.warning(
                        "llm_rate_limited attempt=%d retries=%d backoff_ms=%d",
                        attempt,
                        self.retries,
                        delay_ms,
                    )
                    await self._sleep(delay_ms / 1000.0)
                    continue
                raise
        # Unreachable: the last attempt either returns or raises.
        raise AssertionError("retry loop exited without a result")
