from __future__ import annotations

from typing import Any

import httpx

from utils.decorators import timed
from utils.exceptions import ConfigError, ResponseShapeError, TransportError
from utils.logger import get_logger
from utils.settings import Settings
from utils.validation import extract_candidate_text

log = get_logger(__name__)

# Fixed per deployment; not exposed as runtime knobs.
GENERATION_CONFIG: dict[str, Any] = {
    "temperature": 0.7,
    "topK": 40,
    "topP": 0.95,
    "maxOutputTokens": 150,
}

HARM_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)
SAFETY_THRESHOLD = "BLOCK_MEDIUM_AND_ABOVE"


def build_request_body(prompt: str) -> dict[str, Any]:
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": dict(GENERATION_CONFIG),
        "safetySettings": [
            {"category": category, "threshold": SAFETY_THRESHOLD}
            for category in HARM_CATEGORIES
        ],
    }


class GeminiClient:
    """Thin client for the generateContent REST endpoint.

    A fresh httpx.Client is opened per call so connections are always
    released, and every call carries an explicit timeout.
    """

    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None):
        self.settings = settings
        self._transport = transport

    def _redact(self, text: str) -> str:
        key = self.settings.api_key
        return text.replace(key, "***") if key else text

    @timed
    def generate(self, prompt: str) -> str:
        if not self.settings.has_api_key:
            raise ConfigError("API key is not configured")

        body = build_request_body(prompt)
        try:
            with httpx.Client(timeout=self.settings.request_timeout, transport=self._transport) as client:
                r = client.post(
                    self.settings.endpoint_url,
                    params={"key": self.settings.api_key},
                    headers={"Content-Type": "application/json"},
                    json=body,
                )
                r.raise_for_status()
                payload = r.json()
        except httpx.HTTPStatusError as e:
            raise TransportError(f"API request failed: HTTP {e.response.status_code}") from e
        except httpx.TimeoutException as e:
            raise TransportError(
                f"API request timed out after {self.settings.request_timeout:g}s"
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"API request failed: {type(e).__name__}: {self._redact(str(e))}") from e
        except ValueError as e:
            raise ResponseShapeError("Invalid API response: body is not JSON") from e

        return extract_candidate_text(payload)
