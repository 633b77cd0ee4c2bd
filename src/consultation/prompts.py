"""
Prompt management: system prompts live as versioned .txt files under prompts/.
"""

from __future__ import annotations

from utils.prompt_loader import load_prompt
from utils.prompting import render_turn

MEDICAL_ASSISTANT_PROMPT = "medical_assistant_system.txt"


def get_system_prompt() -> str:
    """Load the healthcare assistant system prompt"""
    return load_prompt(MEDICAL_ASSISTANT_PROMPT)


def build_consultation_prompt(user_text: str, system_prompt: str | None = None) -> str:
    """System instruction and the user's question folded into one prompt."""
    return render_turn(system_prompt if system_prompt is not None else get_system_prompt(), user_text)
