# main.py
"""
Entry point / interactive chat.

This file wires the assistant into a minimal terminal UI:
1) Load configuration (.env, environment, stored API key, or a one-time prompt)
2) Build the OpenAI client, the resilient completion wrapper and the result cache
3) Loop: read a line, submit it with the conversation so far, render the reply

Usage:
- "draft: <brief>"   -> draft a Jira ticket
- "score: <ticket>"  -> score a ticket against the rubric
- "quit" / "exit" / Ctrl-D to leave

The loop awaits each submission before reading the next line, so there is never more
than one request in flight.
"""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path
from typing import List

from dotenv import load_dotenv

from jironaut.assistant import Assistant, user_turn
from jironaut.cache import ResultCache
from jironaut.config import ConfigError, Settings, load_settings
from jironaut.llm import ResilientCompletionClient, get_client
from jironaut.logging_utils import setup_logging
from jironaut.render import render_assistant_message
from jironaut.schema import ConversationMessage
from jironaut.store import KeyValueStore

# Load configuration from .env (API key, model, storage path).
# This keeps secrets out of the codebase.
load_dotenv()

EXIT_COMMANDS = {"quit", "exit"}


def build_assistant(settings: Settings) -> Assistant:
    completion = ResilientCompletionClient(get_client(settings))
    cache = ResultCache(KeyValueStore(settings.storage_path))
    return Assistant(completion=completion, cache=cache, model=settings.model)


async def chat_loop(assistant: Assistant, color: bool) -> None:
    history: List[ConversationMessage] = []
    print("Jironaut ready. Prefix your message with 'draft:' or 'score:'. Type 'quit' to exit.")
    while True:
        try:
            line = await asyncio.to_thread(input, "\n> ")
        except EOFError:
            print()
            return
        if not line.strip():
            continue
        if line.strip().lower() in EXIT_COMMANDS:
            return

        reply = await assistant.submit(line, history)
        history.append(user_turn(line))
        history.append(ConversationMessage(role="assistant", content=reply))
        print(render_assistant_message(reply, color=color))


def main() -> int:
    log_file = os.environ.get("LOG_FILE")
    setup_logging(
        level=os.environ.get("LOG_LEVEL", "WARNING"),
        log_file=Path(log_file) if log_file else None,
    )

    try:
        settings = load_settings()
    except ConfigError as e:
        print("\nERROR:", str(e), file=sys.stderr)
        return 1

    assistant = build_assistant(settings)
    try:
        asyncio.run(chat_loop(assistant, color=sys.stdout.isatty()))
    except KeyboardInterrupt:
        print()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
