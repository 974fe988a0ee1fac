"""
Pytest configuration and shared fixtures for linerelay tests.
"""

import pytest
import sys
from pathlib import Path
from unittest.mock import AsyncMock

# Add the project root to the path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from linerelay.channels.events import WebhookEvent
from linerelay.providers.base import LLMProvider, LLMResponse
from linerelay.providers.session import BackendSession


ENV_VARS = [
    "CHANNEL_ACCESS_TOKEN",
    "CHANNEL_SECRET",
    "GEMINI_API_KEY",
    "GEMINI_MODEL",
    "LINERELAY_LINE__CHANNEL_ACCESS_TOKEN",
    "LINERELAY_LINE__CHANNEL_SECRET",
    "LINERELAY_PROVIDER__API_KEY",
    "LINERELAY_AGENT__MODEL",
    "LINERELAY_AGENT__PERSONA",
    "LINERELAY_AGENT__PERSONA_FILE",
    "LINERELAY_AGENT__HISTORY_TURNS",
    "LINERELAY_AGENT__MAX_CONVERSATIONS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the host environment out of configuration tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class ScriptedProvider(LLMProvider):
    """Provider answering from a per-prompt script.

    Script values are either a reply string or an exception to raise.
    Prompts missing from the script are echoed back.
    """

    def __init__(self, script: dict | None = None):
        super().__init__(api_key="test-key")
        self.script = script or {}
        self.calls: list[list[dict]] = []

    async def chat(self, messages, model=None, max_tokens=1024, temperature=0.7):
        self.calls.append(messages)
        prompt = messages[-1]["content"]
        answer = self.script.get(prompt, f"echo: {prompt}")
        if isinstance(answer, Exception):
            raise answer
        return LLMResponse(content=answer)

    def get_default_model(self) -> str:
        return "gemini/test-model"


@pytest.fixture
def provider():
    return ScriptedProvider()


@pytest.fixture
def session(provider):
    return BackendSession(provider=provider, persona="Be brief.")


@pytest.fixture
def channel():
    """Reply channel recording every call."""
    mock = AsyncMock()
    mock.reply_text = AsyncMock(return_value={"sentMessages": [{"id": "1", "quoteToken": "q"}]})
    return mock


def text_event(text: str, reply_token: str = "R1", user_id: str = "U1") -> WebhookEvent:
    return WebhookEvent.model_validate({
        "type": "message",
        "replyToken": reply_token,
        "source": {"type": "user", "userId": user_id},
        "message": {"type": "text", "id": "m1", "text": text},
    })


def follow_event(user_id: str = "U1") -> WebhookEvent:
    return WebhookEvent.model_validate({
        "type": "follow",
        "replyToken": "F1",
        "source": {"type": "user", "userId": user_id},
    })


def sticker_event() -> WebhookEvent:
    return WebhookEvent.model_validate({
        "type": "message",
        "replyToken": "S1",
        "source": {"type": "user", "userId": "U1"},
        "message": {"type": "sticker", "id": "m2", "packageId": "1", "stickerId": "1"},
    })
