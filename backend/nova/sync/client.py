"""
Session Sync Client - keeps one in-memory conversation consistent with the
session store and caches the session list for display.

Store failures are logged and leave the in-memory state as it was; completion
failures are replaced by a fallback assistant message. Nothing here raises on
a failed request.
"""

import logging
from enum import Enum
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError

from ..llm import provider_for_model
from ..models import ChatMessage, ChatSession
from .api_client import ApiRequestError, NovaApiClient
from .state import ConversationState, Phase, Saved, Unsaved, default_title, display_time

logger = logging.getLogger(__name__)

CONNECTION_FALLBACK = "Sorry, I couldn't connect to the model."
NO_REPLY_FALLBACK = "No reply received."


class SendOutcome(str, Enum):
    """What happened to a send request."""
    IGNORED = "ignored"                # blank input
    TOPIC_REQUIRED = "topic_required"  # prompt for a topic first; nothing sent
    SENT = "sent"                      # exchange appended (reply or fallback)


def dedupe_sessions(sessions: List[ChatSession]) -> List[ChatSession]:
    """Drop repeated ids; the last occurrence wins, first-seen order is kept."""
    by_id: Dict[str, ChatSession] = {}
    for session in sessions:
        by_id[session.session_id] = session
    return list(by_id.values())


class SessionSyncClient:
    """
    In-memory conversation manager reconciling with the session store.
    """

    def __init__(
        self,
        api: Optional[NovaApiClient] = None,
        model: Optional[str] = None,
        clock: Callable[[], str] = display_time,
    ):
        """
        Args:
            api: REST client; a default one from settings when not given
            model: Initially selected model
            clock: Returns the display time stamped on new messages
        """
        self.api = api or NovaApiClient()
        self.state = ConversationState()
        if model:
            self.state.model = model
        self.sessions: List[ChatSession] = []
        self.topic_prompt_open = False
        self._clock = clock

    # Conversation actions

    def new_chat(self) -> None:
        """Start an empty conversation that waits for a topic."""
        self.state = ConversationState(model=self.state.model, phase=Phase.DRAFTING, welcome=False)
        self.topic_prompt_open = False

    def select_model(self, model: str) -> None:
        """Route later completions to ``model``; stored with the next write."""
        self.state.model = model

    async def confirm_topic(self, topic: str) -> Optional[str]:
        """
        Set the conversation title.

        When messages already exist the conversation is stored immediately.

        Returns:
            The session id after a successful write, else None
        """
        topic = topic.strip()
        self.topic_prompt_open = False
        if not topic:
            return None

        self.state.title = topic
        self.state.welcome = False
        if not self.state.messages:
            if self.state.phase == Phase.EMPTY:
                self.state.phase = Phase.DRAFTING
            return None

        self.state.phase = Phase.ACTIVE_DIRTY
        return await self.persist()

    async def send_message(self, text: str) -> SendOutcome:
        """
        Send one user message and append the reply.

        The completed exchange is stored once, after the reply is appended.
        """
        if not text.strip():
            return SendOutcome.IGNORED

        if self.state.title is None and not self.state.messages:
            self.topic_prompt_open = True
            if self.state.phase == Phase.EMPTY:
                self.state.phase = Phase.DRAFTING
            return SendOutcome.TOPIC_REQUIRED

        # The reply belongs to the conversation it was asked in, even if
        # another one is opened while waiting
        state = self.state
        state.welcome = False
        state.messages.append(ChatMessage(role="user", content=text, time=self._clock()))
        state.phase = Phase.ACTIVE_DIRTY

        reply = await self._complete(text, state.model)
        state.messages.append(ChatMessage(role="assistant", content=reply, time=self._clock()))

        if self.state is not state:
            logger.info(
                "Conversation changed while waiting for a reply",
                extra={"extra_fields": {"session_id": state.session_id}}
            )
        await self._persist(state)
        return SendOutcome.SENT

    async def _complete(self, text: str, model: str) -> str:
        provider = provider_for_model(model)
        try:
            reply = await self.api.complete(text, provider, model)
        except ApiRequestError as e:
            logger.error(
                f"Completion request failed: {e}",
                extra={"extra_fields": {"provider": provider, "model": model}}
            )
            return CONNECTION_FALLBACK
        return reply or NO_REPLY_FALLBACK

    # Store reconciliation

    def _payload(self, state: ConversationState) -> dict:
        payload = {
            "title": state.title or default_title(state.messages[0].content),
            "lastMessage": state.last_message,
            "time": self._clock(),
            "messages": [m.model_dump(by_alias=True) for m in state.messages],
            "model": state.model,
        }
        if isinstance(state.save, Saved):
            payload["id"] = state.save.session_id
        return payload

    async def persist(self) -> Optional[str]:
        """
        Store the current conversation: create when unsaved, update when saved.

        Skipped while there are no messages. Without a topic the title is
        derived from the first message. On success the returned id is adopted
        and the session list refreshed.

        Returns:
            The session id, or None when skipped or failed
        """
        return await self._persist(self.state)

    async def _persist(self, state: ConversationState) -> Optional[str]:
        if not state.messages:
            return None

        save = state.save
        payload = self._payload(state)
        try:
            if isinstance(save, Saved):
                session_id = await self.api.update_chat(payload)
            else:
                session_id = await self.api.create_chat(payload)
        except ApiRequestError as e:
            logger.error(
                f"Failed to save chat: {e}",
                extra={"extra_fields": {"session_id": state.session_id, "status_code": e.status_code}}
            )
            return None

        # Adopted by the conversation that was written, current or not
        state.save = Saved(session_id)
        state.phase = Phase.ACTIVE_SYNCED
        logger.info(
            f"Chat saved: {session_id}",
            extra={"extra_fields": {"session_id": session_id, "created": isinstance(save, Unsaved)}}
        )

        await self.refresh_sessions()
        return session_id

    async def open_session(self, session_id: str) -> bool:
        """
        Replace the current conversation with a stored one.

        A session that no longer exists is dropped from the cached list.

        Returns:
            True when loaded; on failure the current conversation is kept
        """
        try:
            chat = ChatSession.model_validate(await self.api.get_chat(session_id))
        except ApiRequestError as e:
            logger.error(f"Failed to load chat {session_id}: {e}")
            if e.not_found:
                await self.refresh_sessions()
            return False
        except ValidationError as e:
            logger.error(f"Failed to load chat {session_id}: {e}")
            return False

        self.state = ConversationState(
            messages=list(chat.messages),
            title=chat.title,
            model=chat.model,
            save=Saved(chat.session_id),
            phase=Phase.ACTIVE_SYNCED,
            welcome=False,
        )
        self.topic_prompt_open = False
        return True

    async def delete_session(self, session_id: str) -> bool:
        """
        Delete a stored session; the current conversation is reset when it is the one deleted.

        The session list is refreshed whether or not the delete succeeded.
        """
        deleted = True
        try:
            await self.api.delete_chat(session_id)
        except ApiRequestError as e:
            logger.error(f"Failed to delete chat {session_id}: {e}")
            deleted = False

        if deleted and self.state.session_id == session_id:
            self.state = ConversationState(model=self.state.model)
            self.topic_prompt_open = False

        await self.refresh_sessions()
        return deleted

    async def refresh_sessions(self) -> List[ChatSession]:
        """
        Reload the cached session list. The previous list is kept on failure.
        """
        try:
            raw = await self.api.list_chats()
            sessions = [ChatSession.model_validate(item) for item in raw]
        except (ApiRequestError, ValidationError) as e:
            logger.error(f"Failed to fetch chats: {e}")
            return self.sessions

        self.sessions = dedupe_sessions(sessions)
        return self.sessions
