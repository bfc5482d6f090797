"""
Runtime configuration.

Settings are read once at process start (after load_dotenv() in main) and passed
around explicitly. The only value the assistant cannot run without is the API key.

API key resolution order:
1) OPENAI_API_KEY from the environment / .env
2) the value persisted in the local store by a previous run
3) interactive prompt; an entered key is persisted for next time
"""
from __future__ import annotations

import getpass
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Optional

from jironaut.store import DEFAULT_STORAGE_PATH, KeyValueStore

logger = logging.getLogger("jironaut.config")

API_KEY_STORE_KEY = "OPENAI_API_KEY"
DEFAULT_MODEL = "gpt-4o-mini"


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class Settings:
    api_key: str
    model: str = DEFAULT_MODEL
    base_url: Optional[str] = None
    storage_path: Path = DEFAULT_STORAGE_PATH


def mask_secret(secret: str) -> str:
    if len(secret) > 8:
        return f"{secret[:4]}...{secret[-4:]}"
    return "***"


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _default_prompt() -> str:
    return getpass.getpass("Enter your OpenAI API key (saved locally for next time): ")


def resolve_api_key(
    store: KeyValueStore,
    env: Mapping[str, str],
    prompt: Optional[Callable[[], str]] = _default_prompt,
) -> str:
    key = _clean(env.get("OPENAI_API_KEY"))
    source = "env"
    if key is None:
        key = _clean(store.get_item(API_KEY_STORE_KEY))
        source = "store"
    if key is None and prompt is not None:
        key = _clean(prompt())
        source = "prompt"
        if key is not None:
            store.set_item(API_KEY_STORE_KEY, key)
    if key is None:
        raise ConfigError(
            "OpenAI API key not found. Set OPENAI_API_KEY in .env or enter it when prompted."
        )
    logger.info("api_key source=%s key=%s", source, mask_secret(key))
    return key


def load_settings(
    env: Optional[Mapping[str, str]] = None,
    prompt: Optional[Callable[[], str]] = _default_prompt,
) -> Settings:
    """
    Build Settings from the environment. Resolves the API key (may prompt once).
    """
    env = os.environ if env is None else env
    storage_path = Path(env.get("JIRONAUT_STORAGE_PATH") or DEFAULT_STORAGE_PATH).expanduser()

    api_key = resolve_api_key(KeyValueStore(storage_path), env, prompt)

    return Settings(
        api_key=api_key,
        model=_clean(env.get("JIRONAUT_MODEL")) or DEFAULT_MODEL,
        base_url=_clean(env.get("OPENAI_BASE_URL")),
        storage_path=storage_path,
    )
