"""
Result cache.

Maps a cleaned input (mode prefix and surrounding whitespace removed) to the final
assistant text produced for it, so repeating a request does not pay for a second call.

- Stored as one JSON mapping under a single well-known key of the KeyValueStore.
- Every get/put is a full load/deserialize/mutate/reserialize round trip.
- No TTL, no eviction: the mapping grows for as long as the store file lives.
"""
from __future__ import annotations

import json
import logging
import threading
from typing import Dict, Optional

from jironaut.store import KeyValueStore

logger = logging.getLogger("jironaut.cache")

CACHE_KEY = "jironautCache"


class ResultCache:
    def __init__(self, store: KeyValueStore, key: str = CACHE_KEY) -> None:
        self.store = store
        self.key = key
        # Guards the read-modify-write in put(); two writers would otherwise lose entries.
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, str]:
        raw = self.store.get_item(self.key)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("cache_corrupt key=%s; treating as empty", self.key)
            return {}
        if not isinstance(data, dict):
            return {}
        return data

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._read().get(key)
        logger.debug("cache_%s key_len=%d", "hit" if value is not None else "miss", len(key))
        return value

    def put(self, key: str, text: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = text
            self.store.set_item(self.key, json.dumps(data, ensure_ascii=False))
        logger.debug("cache_put key_len=%d entries=%d", len(key), len(data))
