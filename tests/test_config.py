"""Unit tests for settings and API key resolution."""

from __future__ import annotations

import logging

import pytest

from jironaut.config import (
    API_KEY_STORE_KEY,
    DEFAULT_MODEL,
    ConfigError,
    load_settings,
    mask_secret,
    resolve_api_key,
)
from jironaut.store import KeyValueStore


def _no_prompt() -> str:
    raise AssertionError("prompt should not be called")


@pytest.mark.unit
class TestResolveApiKey:
    def test_environment_wins(self, store):
        store.set_item(API_KEY_STORE_KEY, "sk-stored")
        assert resolve_api_key(store, {"OPENAI_API_KEY": "  sk-env  "}, _no_prompt) == "sk-env"

    def test_falls_back_to_store(self, store):
        store.set_item(API_KEY_STORE_KEY, " sk-stored ")
        assert resolve_api_key(store, {"OPENAI_API_KEY": "   "}, _no_prompt) == "sk-stored"

    def test_prompts_and_persists(self, store):
        assert resolve_api_key(store, {}, lambda: " sk-typed ") == "sk-typed"
        assert store.get_item(API_KEY_STORE_KEY) == "sk-typed"

    def test_blank_prompt_is_an_error_and_nothing_is_stored(self, store):
        with pytest.raises(ConfigError):
            resolve_api_key(store, {}, lambda: "  ")
        assert store.get_item(API_KEY_STORE_KEY) is None

    def test_no_prompt_available(self, store):
        with pytest.raises(ConfigError):
            resolve_api_key(store, {}, None)

    def test_key_is_logged_masked(self, store, caplog):
        with caplog.at_level(logging.INFO, logger="jironaut.config"):
            resolve_api_key(store, {"OPENAI_API_KEY": "sk-abcdefghijkl"}, _no_prompt)
        text = caplog.text
        assert "sk-a...ijkl" in text
        assert "sk-abcdefghijkl" not in text


@pytest.mark.unit
@pytest.mark.parametrize(
    "secret, masked",
    [("sk-1234567890", "sk-1...7890"), ("12345678", "***"), ("", "***")],
)
def test_mask_secret(secret, masked):
    assert mask_secret(secret) == masked


@pytest.mark.unit
class TestLoadSettings:
    def test_defaults(self, tmp_path):
        path = tmp_path / "s.json"
        settings = load_settings({"OPENAI_API_KEY": "sk-x", "JIRONAUT_STORAGE_PATH": str(path)}, _no_prompt)
        assert settings.api_key == "sk-x"
        assert settings.model == DEFAULT_MODEL
        assert settings.base_url is None
        assert settings.storage_path == path

    def test_overrides(self, tmp_path):
        env = {
            "OPENAI_API_KEY": "sk-x",
            "JIRONAUT_STORAGE_PATH": str(tmp_path / "s.json"),
            "JIRONAUT_MODEL": "gpt-4.1",
            "OPENAI_BASE_URL": "https://gateway.example/v1",
        }
        settings = load_settings(env, _no_prompt)
        assert settings.model == "gpt-4.1"
        assert settings.base_url == "https://gateway.example/v1"

    def test_key_from_store_at_configured_path(self, tmp_path):
        path = tmp_path / "s.json"
        KeyValueStore(path).set_item(API_KEY_STORE_KEY, "sk-saved")
        settings = load_settings({"JIRONAUT_STORAGE_PATH": str(path)}, _no_prompt)
        assert settings.api_key == "sk-saved"

    def test_settings_are_frozen(self, tmp_path):
        settings = load_settings(
            {"OPENAI_API_KEY": "sk-x", "JIRONAUT_STORAGE_PATH": str(tmp_path / "s.json")}, _no_prompt
        )
        with pytest.raises(AttributeError):
            settings.model = "other"
