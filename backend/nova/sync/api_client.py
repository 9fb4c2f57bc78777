"""
HTTP client for the session store and the completion proxy.

Every call is bounded by a timeout. Transport failures, timeouts, non-2xx
responses and undecodable bodies all surface as ``ApiRequestError``.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings

logger = logging.getLogger(__name__)


class ApiRequestError(Exception):
    """A store or completion request did not succeed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


class NovaApiClient:
    """
    Thin async client for the NOVA Chat REST API.
    """

    CHATS_PATH = "/api/chats"
    COMPLETION_PATH = "/api/chat/completion"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        completion_timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: API root, defaults to ``settings.api_base_url``
            timeout: Timeout for store calls in seconds
            completion_timeout: Timeout for completion calls in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.completion_timeout = (
            completion_timeout if completion_timeout is not None else settings.completion_timeout
        )
        self._transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=timeout or self.timeout,
                transport=self._transport,
            ) as client:
                resp = await client.request(method, path, json=json)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise ApiRequestError(
                f"{method} {path} returned {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise ApiRequestError(f"{method} {path} failed: {e!r}") from e
        except ValueError as e:
            raise ApiRequestError(f"{method} {path} returned an invalid body") from e

        if not isinstance(data, dict):
            raise ApiRequestError(f"{method} {path} returned an invalid body")
        return data

    async def list_chats(self) -> List[Dict[str, Any]]:
        data = await self._request("GET", self.CHATS_PATH)
        chats = data.get("chats")
        if not isinstance(chats, list):
            raise ApiRequestError("Chat list response has no 'chats'")
        return chats

    async def get_chat(self, session_id: str) -> Dict[str, Any]:
        data = await self._request("GET", f"{self.CHATS_PATH}/{session_id}")
        chat = data.get("chat")
        if not isinstance(chat, dict):
            raise ApiRequestError("Chat response has no 'chat'")
        return chat

    async def create_chat(self, payload: Dict[str, Any]) -> str:
        data = await self._request("POST", self.CHATS_PATH, json=payload)
        return self._session_id_from(data)

    async def update_chat(self, payload: Dict[str, Any]) -> str:
        data = await self._request("PUT", self.CHATS_PATH, json=payload)
        return self._session_id_from(data)

    async def delete_chat(self, session_id: str) -> str:
        data = await self._request("DELETE", f"{self.CHATS_PATH}/{session_id}")
        return data.get("message", "")

    async def complete(self, message: str, provider: str, model: str) -> Optional[str]:
        """
        Ask the completion proxy for a reply.

        Returns:
            The reply text, or None when the response carries no reply
        """
        data = await self._request(
            "POST",
            self.COMPLETION_PATH,
            json={"message": message, "provider": provider, "model": model},
            timeout=self.completion_timeout,
        )
        reply = data.get("reply")
        return reply if isinstance(reply, str) and reply else None

    @staticmethod
    def _session_id_from(data: Dict[str, Any]) -> str:
        # Older servers answer with chatId
        session_id = data.get("id", data.get("chatId"))
        if session_id is None or session_id == "":
            raise ApiRequestError("Response carries no session id")
        return str(session_id)
