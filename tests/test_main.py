"""Tests for the interactive entry point (no network, scripted input)."""

from __future__ import annotations

import asyncio
import builtins
import json

import pytest

import main
from fakes import FakeClient, RecordingSleep
from jironaut.assistant import Assistant
from jironaut.config import Settings
from jironaut.llm import ResilientCompletionClient
from jironaut.prompts import SCORE_PROMPT


def _scripted_input(monkeypatch, lines):
    it = iter(lines)

    def fake_input(prompt=""):
        try:
            return next(it)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr(builtins, "input", fake_input)


@pytest.mark.unit
class TestChatLoop:
    def test_renders_replies_and_keeps_history(self, monkeypatch, capsys, cache):
        reply = json.dumps({"scores": {"Risk/Impact": 10, "Dependencies": 10}})
        fake = FakeClient([reply, '{"title": "t"}'])
        assistant = Assistant(
            completion=ResilientCompletionClient(fake, sleep=RecordingSleep()),
            cache=cache,
            model="m",
        )
        _scripted_input(monkeypatch, ["score: ticket", "   ", "draft: brief", "quit", "never read"])

        asyncio.run(main.chat_loop(assistant, color=False))

        out = capsys.readouterr().out
        assert "🏆 Total Score: 20%" in out
        assert "Badge: Risk Wrangler" in out
        assert len(fake.calls) == 2
        second = fake.calls[1]["messages"]
        assert [m["role"] for m in second] == ["system", "user", "assistant", "user"]
        assert second[1]["content"] == f"{SCORE_PROMPT}\n\nticket"
        assert second[2]["content"] == json.dumps({"scores": {"Risk/Impact": 10, "Dependencies": 10}, "total": 20, "badge": "Risk Wrangler"})

    def test_eof_ends_the_loop(self, monkeypatch, cache):
        fake = FakeClient(["{}"])
        assistant = Assistant(
            completion=ResilientCompletionClient(fake, sleep=RecordingSleep()),
            cache=cache,
            model="m",
        )
        _scripted_input(monkeypatch, [])
        asyncio.run(main.chat_loop(assistant, color=False))
        assert fake.calls == []


@pytest.mark.unit
def test_build_assistant_uses_settings(tmp_path):
    settings = Settings(api_key="sk-test", model="gpt-4.1", storage_path=tmp_path / "s.json")
    assistant = main.build_assistant(settings)
    assert assistant.model == "gpt-4.1"
    assert assistant.cache.store.path == tmp_path / "s.json"
    assert assistant.completion.retries == 3
    assert assistant.completion.base_delay_ms == 800


@pytest.mark.unit
def test_main_exits_1_without_api_key(monkeypatch, tmp_path, capsys):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setenv("JIRONAUT_STORAGE_PATH", str(tmp_path / "s.json"))
    monkeypatch.setattr(main, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr("getpass.getpass", lambda prompt="": "")
    assert main.main() == 1
    assert "OpenAI API key not found" in capsys.readouterr().err
