"""
Conversation data model: immutable log entries and the per-session state
that the controller owns.
"""

from __future__ import annotations

import random
import string
from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

REPORT_ID_LENGTH = 9
REPORT_ID_ALPHABET = string.ascii_uppercase + string.digits


def new_report_id() -> str:
    """Short random uppercase token; no uniqueness check against earlier ids."""
    return "".join(random.choices(REPORT_ID_ALPHABET, k=REPORT_ID_LENGTH))


def local_now() -> datetime:
    return datetime.now().astimezone()


def format_timestamp(ts: datetime) -> str:
    """Human-readable local time, used only for display and export."""
    return ts.astimezone().strftime("%x, %X")


class UserEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["user"] = "user"
    text: str


class BotEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["bot"] = "bot"
    query: str
    response: str
    timestamp: datetime = Field(default_factory=local_now)
    report_id: str = Field(default_factory=new_report_id)

    @property
    def display_timestamp(self) -> str:
        return format_timestamp(self.timestamp)


ConversationEntry = Annotated[Union[UserEntry, BotEntry], Field(discriminator="kind")]


@dataclass
class SessionState:
    """
    Everything one chat session holds in memory.
    The log is append-only; pending/error are the two scalar flags.
    """
    log: List[ConversationEntry] = field(default_factory=list)
    pending: bool = False
    error: Optional[str] = None

    def append(self, entry: ConversationEntry) -> None:
        self.log.append(entry)

    def has_history(self) -> bool:
        """Check if conversation has started"""
        return len(self.log) > 0
