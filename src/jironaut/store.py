"""
Process-local keyed store.

Purpose:
- A tiny string -> string store persisted as one JSON file, used for the two pieces
  of state the assistant keeps between runs: the result cache and the API key.

Design choices:
- Flat mapping, UTF-8, pretty JSON so the file stays readable and diff-friendly.
- Writes go through a temp file + os.replace so a crash never leaves half a file.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger("jironaut.store")

DEFAULT_STORAGE_PATH = Path("~/.jironaut/storage.json")


class KeyValueStore:
    def __init__(self, path: Path = DEFAULT_STORAGE_PATH) -> None:
        self.path = Path(path).expanduser()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            logger.warning("store_corrupt path=%s; starting empty", self.path)
            return {}
        if not isinstance(data, dict):
            logger.warning("store_not_a_mapping path=%s; starting empty", self.path)
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _save(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp, self.path)

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)
