"""
Conversation state held by the sync client.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from ..llm import DEFAULT_MODEL
from ..models import ChatMessage

TITLE_MAX_LENGTH = 30
ELLIPSIS = "..."


class Phase(str, Enum):
    """Where the current conversation is in its lifecycle."""
    EMPTY = "empty"              # nothing loaded, welcome placeholder
    DRAFTING = "drafting"        # new chat, waiting for a topic or first message
    ACTIVE_DIRTY = "active_dirty"    # has changes not yet stored
    ACTIVE_SYNCED = "active_synced"  # matches the last successful write


@dataclass(frozen=True)
class Unsaved:
    """The conversation has never been stored."""


@dataclass(frozen=True)
class Saved:
    """The conversation is stored under ``session_id``."""
    session_id: str


SaveTag = Union[Unsaved, Saved]


@dataclass
class ConversationState:
    """The in-memory conversation."""
    messages: List[ChatMessage] = field(default_factory=list)
    title: Optional[str] = None
    model: str = DEFAULT_MODEL
    save: SaveTag = field(default_factory=Unsaved)
    phase: Phase = Phase.EMPTY
    welcome: bool = True

    @property
    def session_id(self) -> Optional[str]:
        return self.save.session_id if isinstance(self.save, Saved) else None

    @property
    def last_message(self) -> Optional[str]:
        return self.messages[-1].content if self.messages else None


def default_title(content: str) -> str:
    """Title derived from the first message: at most 30 characters, ellipsis when cut."""
    content = " ".join(content.split())
    if len(content) <= TITLE_MAX_LENGTH:
        return content
    return content[:TITLE_MAX_LENGTH - len(ELLIPSIS)].rstrip() + ELLIPSIS


def display_time(moment: Optional[datetime] = None) -> str:
    """Locale-style time of day, e.g. ``10:42:07 AM``."""
    moment = moment or datetime.now()
    return moment.strftime("%I:%M:%S %p").lstrip("0")
