"""
Pytest fixtures for PureLabel tests. Gemini and Tesseract are replaced by
in-process doubles; Opik tracing is disabled.
"""

from __future__ import annotations

import os

os.environ.setdefault("OPIK_TRACK_DISABLE", "true")
os.environ["LOCAL_SIMULATED_DELAY_MS"] = "0"
os.environ["GOOGLE_GENERATIVE_AI_API_KEY"] = ""

import pytest

from purelabel.config import get_settings


class FakeExtractor:
    """Text extractor returning canned text or raising."""

    def __init__(self, text: str = "", error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls = 0

    async def extract_text(self, image_bytes: bytes) -> str:
        self.calls += 1
        if self.error:
            raise self.error
        return self.text


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeGeminiModel:
    """Stands in for genai.GenerativeModel.generate_content_async."""

    def __init__(self, text: str | None = None, error: Exception | None = None):
        self.text = text
        self.error = error
        self.contents = None

    async def generate_content_async(self, contents):
        self.contents = contents
        if self.error:
            raise self.error
        return FakeResponse(self.text)


class FakeChat:
    def __init__(self, reply: str | None, error: Exception | None, history):
        self.reply = reply
        self.error = error
        self.history = history
        self.sent = None

    async def send_message_async(self, message):
        self.sent = message
        if self.error:
            raise self.error
        return FakeResponse(self.reply)


class FakeChatModel:
    """Stands in for genai.GenerativeModel.start_chat."""

    def __init__(self, reply: str | None = "Fine in moderation.", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.chat = None

    def start_chat(self, history):
        self.chat = FakeChat(self.reply, self.error, history)
        return self.chat


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so monkeypatched env vars take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def with_api_key(monkeypatch):
    monkeypatch.setenv("GOOGLE_GENERATIVE_AI_API_KEY", "test-key")
    get_settings.cache_clear()
    return "test-key"


@pytest.fixture
def local_analyst():
    from purelabel.agents.local_analyst import LocalAnalyst

    return LocalAnalyst(extractor=FakeExtractor(), simulated_delay_ms=0)
