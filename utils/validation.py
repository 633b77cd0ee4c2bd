from __future__ import annotations
from typing import Any

import pydantic
from pydantic import BaseModel, Field

from utils.exceptions import ResponseShapeError

# Only the fields we read from a generateContent response are modelled;
# everything else the endpoint sends is ignored.

class Part(BaseModel):
    text: str | None = None

class Content(BaseModel):
    parts: list[Part] = Field(default_factory=list)

class Candidate(BaseModel):
    content: Content | None = None
    finishReason: str | None = None

class PromptFeedback(BaseModel):
    blockReason: str | None = None

class GenerateContentResponse(BaseModel):
    candidates: list[Candidate] = Field(default_factory=list)
    promptFeedback: PromptFeedback | None = None

def _describe_empty(resp: GenerateContentResponse) -> str:
    if resp.promptFeedback and resp.promptFeedback.blockReason:
        return f"prompt blocked ({resp.promptFeedback.blockReason})"
    if resp.candidates and resp.candidates[0].finishReason:
        return f"no text in first candidate (finishReason={resp.candidates[0].finishReason})"
    if not resp.candidates:
        return "no candidates"
    return "no text in first candidate"

def extract_candidate_text(payload: Any) -> str:
    """Return candidates[0].content.parts[0].text or raise ResponseShapeError."""
    if not isinstance(payload, dict):
        raise ResponseShapeError("Invalid API response: JSON must be an object.")
    try:
        resp = GenerateContentResponse.model_validate(payload)
    except pydantic.ValidationError as e:
        raise ResponseShapeError(f"Invalid API response: {e.error_count()} field error(s)") from e

    first = resp.candidates[0] if resp.candidates else None
    parts = first.content.parts if first and first.content else []
    text = parts[0].text if parts else None
    # Whitespace-only text counts as empty, like blank model output in the chat service.
    if not text or not text.strip():
        raise ResponseShapeError(f"Invalid API response: {_describe_empty(resp)}")
    return text
