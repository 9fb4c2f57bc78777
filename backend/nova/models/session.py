"""
Session Models - Defines structures for persisted chat sessions.

Wire names are camelCase (``lastMessage``, ``createdAt``); the session key is
serialized as ``id``.
"""

from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChatMessage(CamelModel):
    """One message of a conversation."""
    role: Literal["user", "assistant"]
    content: str
    time: str = ""  # locale-formatted display time


class SessionPayload(CamelModel):
    """
    Body of a create or update request.

    Every field is optional at parse time so that missing mandatory fields are
    reported by the store as a validation error rather than a schema error.
    """
    session_id: Optional[str] = Field(default=None, alias="id")
    title: Optional[str] = None
    last_message: Optional[str] = None
    time: Optional[str] = None
    messages: Optional[List[ChatMessage]] = None
    model: Optional[str] = None

    @field_validator("session_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Union[int, str, None]) -> Optional[str]:
        # Older clients send numeric timestamp ids
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        raise ValueError("id must be a string or an integer")


class ChatSession(CamelModel):
    """A persisted chat session."""
    session_id: str = Field(alias="id")
    title: str
    last_message: str
    time: str = ""
    messages: List[ChatMessage]
    model: str
    created_at: datetime
    updated_at: datetime


class SessionList(BaseModel):
    """Response of the list endpoint."""
    chats: List[ChatSession]


class SessionEnvelope(BaseModel):
    """Response of the get endpoint."""
    chat: ChatSession


class SessionIdResponse(CamelModel):
    """Response of create and update."""
    session_id: str = Field(alias="id")


class DeleteResponse(BaseModel):
    """Response of delete."""
    message: str
