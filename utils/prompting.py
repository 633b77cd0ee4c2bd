from __future__ import annotations

TURN_TEMPLATE = "{system}\n\nUser: {user}\n\nAssistant:"

def render(template: str, **kwargs) -> str:
    # Keep templates simple and explicit; avoid arbitrary eval.
    return template.format(**kwargs)

def render_turn(system: str, user: str) -> str:
    """Single-turn prompt: system instruction followed by the user's text."""
    return render(TURN_TEMPLATE, system=system, user=user)
