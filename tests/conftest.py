from __future__ import annotations

import pytest

from fakes import RecordingSleep
from jironaut.cache import ResultCache
from jironaut.store import KeyValueStore


@pytest.fixture
def store(tmp_path) -> KeyValueStore:
    return KeyValueStore(tmp_path / "storage.json")


@pytest.fixture
def cache(store) -> ResultCache:
    return ResultCache(store)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
