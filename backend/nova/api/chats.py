"""
Chat session API endpoints - CRUD over persisted chat sessions.
"""

import logging
from fastapi import APIRouter, HTTPException, Depends, status

from ..core.errors import SessionStoreError
from ..models import (
    SessionPayload, SessionList, SessionEnvelope, SessionIdResponse, DeleteResponse,
)
from ..storage import SessionStore, get_session_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chats", tags=["chats"])


def _to_http_error(error: SessionStoreError, action: str) -> HTTPException:
    """Map a store error to an HTTPException, logging server-side failures."""
    if error.status_code >= 500:
        logger.error(
            f"Error {action}: {error.message}",
            exc_info=error,
            extra={"extra_fields": {"session_id": error.session_id}}
        )
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error {action}"
        )
    return HTTPException(status_code=error.status_code, detail=error.message)


@router.get("", response_model=SessionList)
async def list_chats(store: SessionStore = Depends(get_session_store)):
    """
    List all chat sessions, most recently updated first.
    """
    try:
        chats = await store.list_sessions()
    except SessionStoreError as e:
        raise _to_http_error(e, "fetching chats")
    return SessionList(chats=chats)


@router.get("/{session_id}", response_model=SessionEnvelope)
async def get_chat(session_id: str, store: SessionStore = Depends(get_session_store)):
    """
    Get one chat session.

    Args:
        session_id: Session id

    Returns:
        The session wrapped as ``{"chat": ...}``
    """
    try:
        chat = await store.get_session(session_id)
    except SessionStoreError as e:
        raise _to_http_error(e, "fetching chat")
    return SessionEnvelope(chat=chat)


@router.post("", response_model=SessionIdResponse, status_code=status.HTTP_201_CREATED)
async def create_chat(payload: SessionPayload, store: SessionStore = Depends(get_session_store)):
    """
    Create a chat session.

    The id is taken from the body when present, otherwise derived from the
    current time in milliseconds.
    """
    try:
        session_id = await store.create_session(payload)
    except SessionStoreError as e:
        raise _to_http_error(e, "creating chat")
    return SessionIdResponse(session_id=session_id)


@router.put("", response_model=SessionIdResponse)
async def update_chat(payload: SessionPayload, store: SessionStore = Depends(get_session_store)):
    """
    Update a chat session identified by the ``id`` in the body.

    Fields absent from the body keep their stored values.
    """
    try:
        session_id = await store.update_session(payload.session_id, payload)
    except SessionStoreError as e:
        raise _to_http_error(e, "updating chat")
    return SessionIdResponse(session_id=session_id)


@router.delete("/{session_id}", response_model=DeleteResponse)
async def delete_chat(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Delete a chat session."""
    try:
        await store.delete_session(session_id)
    except SessionStoreError as e:
        raise _to_http_error(e, "deleting chat")
    return DeleteResponse(message="Chat deleted successfully")
