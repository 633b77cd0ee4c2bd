"""
Turns a model reply into render-ready lines of plain/emphasized segments.
"""

from __future__ import annotations

import re
from typing import List, Literal

from pydantic import BaseModel, ConfigDict

# Non-greedy: "**a** and **b**" is two spans, not one.
EMPHASIS_PATTERN = re.compile(r"(\*\*.*?\*\*)")
MARKER = "**"

SegmentKind = Literal["plain", "emphasized"]


class Segment(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: SegmentKind
    text: str


Line = List[Segment]


def _format_line(line: str) -> Line:
    segments: Line = []
    for piece in EMPHASIS_PATTERN.split(line):
        if not piece:
            continue
        if EMPHASIS_PATTERN.fullmatch(piece):
            segments.append(Segment(kind="emphasized", text=piece[len(MARKER):-len(MARKER)]))
        else:
            segments.append(Segment(kind="plain", text=piece))
    return segments or [Segment(kind="plain", text="")]


def format_message(text: str) -> List[Line]:
    """
    Split on line breaks, then on **emphasis** spans.

    Unpaired markers are left in the plain text as-is; emphasis does not nest.
    """
    return [_format_line(line) for line in text.split("\n")]


def strip_emphasis(lines: List[Line]) -> str:
    """Inverse view of format_message with the markers removed."""
    return "\n".join("".join(seg.text for seg in line) for line in lines)


def to_markdown(lines: List[Line]) -> str:
    """Render for st.markdown; hard line breaks keep the original layout."""
    rendered = []
    for line in lines:
        rendered.append("".join(
            f"**{seg.text}**" if seg.kind == "emphasized" and seg.text else seg.text
            for seg in line
        ))
    return "  \n".join(rendered)


def to_rich_markup(lines: List[Line]) -> str:
    """Render for a rich Console; user text is escaped so brackets print literally."""
    from rich.markup import escape

    rendered = []
    for line in lines:
        rendered.append("".join(
            f"[bold]{escape(seg.text)}[/bold]" if seg.kind == "emphasized" else escape(seg.text)
            for seg in line
        ))
    return "\n".join(rendered)
