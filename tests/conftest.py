from __future__ import annotations

import json
from typing import Callable

import httpx
import pytest

from utils.gemini import GeminiClient
from utils.settings import Settings

SYSTEM_PROMPT = "You are a helpful healthcare assistant."


def gemini_payload(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}, "finishReason": "STOP"}]}


class RecordingHandler:
    """httpx.MockTransport handler that remembers every request it served."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]):
        self.respond = respond
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)

    def body(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="test-key", request_timeout=5.0)


@pytest.fixture
def make_client(settings):
    def _make(respond, client_settings: Settings | None = None):
        handler = RecordingHandler(respond)
        client = GeminiClient(client_settings or settings, transport=httpx.MockTransport(handler))
        return client, handler
    return _make
