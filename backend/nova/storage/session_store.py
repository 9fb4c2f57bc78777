"""
Session Store - Durable CRUD over chat session documents.

Each session is one JSON document at ``chats/<id>.json`` in the configured
StorageInterface. Writes go through a single lock so that the existence
check and the write of a create (or the read-merge-write of an update)
cannot interleave with another write in this process.
"""

import asyncio
import json
import logging
import re
import time
from datetime import datetime, timedelta, timezone
from typing import Optional, List, Dict, Any

from pydantic import ValidationError

from ..core.errors import (
    SessionStoreError,
    SessionValidationError,
    SessionNotFoundError,
    SessionConflictError,
)
from ..models import ChatSession, SessionPayload
from .interface import StorageInterface
from .local_storage import LocalStorage

logger = logging.getLogger(__name__)

# Ids name files on disk
SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]{0,127}$")

MANDATORY_FIELDS = ("title", "last_message", "messages", "model")
MUTABLE_FIELDS = ("title", "last_message", "time", "messages", "model")


def generate_session_id() -> str:
    """Default id: current time in milliseconds."""
    return str(int(time.time() * 1000))


class SessionStore:
    """
    Persistent collection of chat sessions keyed by session id.
    """

    def __init__(self, storage: StorageInterface, collection: str = "chats"):
        """
        Initialize the session store.

        Args:
            storage: StorageInterface implementation (typically LocalStorage)
            collection: Directory holding one document per session
        """
        self.storage = storage
        self.collection = collection
        self._write_lock = asyncio.Lock()
        self._last_timestamp: Optional[datetime] = None

    def _get_session_path(self, session_id: str) -> str:
        return f"{self.collection}/{session_id}.json"

    def _next_timestamp(self) -> datetime:
        """Current UTC time, bumped so successive writes never share a timestamp."""
        now = datetime.now(timezone.utc)
        if self._last_timestamp is not None and now <= self._last_timestamp:
            now = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = now
        return now

    @staticmethod
    def _check_session_id(session_id: Optional[str]) -> str:
        if not session_id:
            raise SessionValidationError("Missing required fields: id")
        if not SESSION_ID_PATTERN.match(session_id):
            raise SessionValidationError(f"Invalid session id: {session_id!r}", session_id)
        return session_id

    @staticmethod
    def _check_mandatory(fields: Dict[str, Any], session_id: Optional[str] = None) -> None:
        missing = [name for name in MANDATORY_FIELDS if not fields.get(name)]
        if missing:
            raise SessionValidationError(
                f"Missing required fields: {', '.join(missing)}", session_id
            )

    async def _load(self, path: str, session_id: Optional[str] = None) -> Optional[bytes]:
        """Load a document; None when absent, SessionStoreError when present but unreadable."""
        content = await self.storage.load(path)
        if content is None and await self.storage.exists(path):
            raise SessionStoreError(f"Failed to read session document {path}", session_id)
        return content

    async def _read(self, session_id: str) -> Optional[ChatSession]:
        content = await self._load(self._get_session_path(session_id), session_id)
        if content is None:
            return None
        try:
            return ChatSession.model_validate_json(content)
        except ValidationError as e:
            logger.error(f"Corrupt session document {session_id}: {e}")
            raise SessionStoreError(f"Corrupt session document: {session_id}", session_id) from e

    async def _write(self, session: ChatSession) -> None:
        content = json.dumps(
            session.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False
        )
        saved = await self.storage.save(self._get_session_path(session.session_id), content)
        if not saved:
            raise SessionStoreError(
                f"Failed to persist session {session.session_id}", session.session_id
            )

    async def list_sessions(self) -> List[ChatSession]:
        """
        List all sessions, most recently updated first.

        Documents that fail validation are skipped with a warning; a storage
        failure raises SessionStoreError.
        """
        files = await self.storage.list(self.collection, pattern="*.json")
        sessions = []
        for file_path in files:
            content = await self._load(file_path)
            if content is None:
                # Deleted between list and load
                continue
            try:
                sessions.append(ChatSession.model_validate_json(content))
            except ValidationError as e:
                logger.warning(f"Skipping unreadable session document {file_path}: {e}")

        sessions.sort(key=lambda s: s.updated_at, reverse=True)
        return sessions

    async def get_session(self, session_id: str) -> ChatSession:
        """
        Get one session.

        Raises:
            SessionNotFoundError: No session with that id
        """
        if not session_id or not SESSION_ID_PATTERN.match(session_id):
            raise SessionNotFoundError("Chat not found", session_id)
        session = await self._read(session_id)
        if session is None:
            raise SessionNotFoundError("Chat not found", session_id)
        return session

    async def create_session(self, payload: SessionPayload) -> str:
        """
        Create a new session.

        Args:
            payload: Session fields; ``session_id`` is derived from the clock when absent

        Returns:
            str: The assigned session id

        Raises:
            SessionValidationError: Mandatory field missing or malformed id
            SessionConflictError: The id is already taken
        """
        fields = payload.model_dump(exclude={"session_id"})
        self._check_mandatory(fields, payload.session_id)
        session_id = self._check_session_id(payload.session_id or generate_session_id())

        async with self._write_lock:
            if await self.storage.exists(self._get_session_path(session_id)):
                raise SessionConflictError(f"Chat {session_id} already exists", session_id)

            now = self._next_timestamp()
            session = ChatSession(
                session_id=session_id,
                title=fields["title"],
                last_message=fields["last_message"],
                time=fields.get("time") or "",
                messages=payload.messages,
                model=fields["model"],
                created_at=now,
                updated_at=now,
            )
            await self._write(session)

        logger.info(
            f"Session created: {session_id}",
            extra={"extra_fields": {"session_id": session_id, "message_count": len(session.messages)}}
        )
        return session_id

    async def update_session(self, session_id: Optional[str], payload: SessionPayload) -> str:
        """
        Merge the supplied mutable fields over an existing session.

        Returns:
            str: The session id

        Raises:
            SessionValidationError: Missing id, or a mandatory field missing after the merge
            SessionNotFoundError: No session with that id
        """
        session_id = self._check_session_id(session_id)
        updates = {
            name: getattr(payload, name)
            for name in MUTABLE_FIELDS
            if name in payload.model_fields_set
        }

        async with self._write_lock:
            existing = await self._read(session_id)
            if existing is None:
                raise SessionNotFoundError("Chat not found", session_id)

            merged = {name: getattr(existing, name) for name in MUTABLE_FIELDS}
            merged.update(updates)
            self._check_mandatory(merged, session_id)

            session = existing.model_copy(update={
                **merged,
                "time": merged["time"] or "",
                "updated_at": self._next_timestamp(),
            })
            await self._write(session)

        logger.info(
            f"Session updated: {session_id}",
            extra={"extra_fields": {"session_id": session_id, "fields": sorted(updates)}}
        )
        return session_id

    async def delete_session(self, session_id: str) -> None:
        """
        Delete a session.

        Raises:
            SessionNotFoundError: No session with that id
            SessionStoreError: The document exists but could not be removed
        """
        if not session_id or not SESSION_ID_PATTERN.match(session_id):
            raise SessionNotFoundError("Chat not found", session_id)

        async with self._write_lock:
            deleted = await self.storage.delete(self._get_session_path(session_id))
            if not deleted and await self.storage.exists(self._get_session_path(session_id)):
                raise SessionStoreError(f"Failed to delete session {session_id}", session_id)
        if not deleted:
            raise SessionNotFoundError("Chat not found", session_id)

        logger.info(f"Session deleted: {session_id}", extra={"extra_fields": {"session_id": session_id}})


# Global session store instance
_session_store: Optional[SessionStore] = None


def init_session_store(storage: Optional[StorageInterface] = None) -> SessionStore:
    """
    Initialize the global session store instance.

    Args:
        storage: Optional StorageInterface implementation. If None, creates LocalStorage.
    """
    global _session_store
    if storage is None:
        storage = LocalStorage()
    _session_store = SessionStore(storage)
    return _session_store


def get_session_store() -> SessionStore:
    """
    Get the global session store instance.

    Raises:
        RuntimeError: If the session store has not been initialized
    """
    if _session_store is None:
        raise RuntimeError("Session store not initialized. Call init_session_store() first.")
    return _session_store
