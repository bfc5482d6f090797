"""
Application-wide logging utilities.

Purpose:
- Provide a single, consistent logging configuration for the assistant.
- Support both console output and file-based logs (debugging, cost tracking).

Design principles:
- Centralized configuration: logging is initialized once in main().
- Console logs go to stderr so the chat transcript on stdout stays clean.
- Opt-in file logging to keep local runs lightweight.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
) -> None:
    """
    Configure application logging.
    - Logs to stderr (console)
    - Optionally also logs to a file
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = []

    # Console handler
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(log_level)
    handlers.append(console)

    # File handler (optional)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        handlers.append(file_handler)

    logging.basicConfig(
        level=log_level,
        handlers=handlers,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        force=True,
    )

    # The OpenAI SDK logs every HTTP request at INFO through httpx; keep that out of the chat.
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))
