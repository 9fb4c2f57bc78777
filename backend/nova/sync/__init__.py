"""Sync module - client-side conversation state reconciled with the session store."""

from .api_client import NovaApiClient, ApiRequestError
from .state import ConversationState, Phase, Saved, Unsaved, default_title, display_time
from .client import (
    SessionSyncClient, SendOutcome, dedupe_sessions, CONNECTION_FALLBACK, NO_REPLY_FALLBACK,
)

__all__ = [
    'NovaApiClient', 'ApiRequestError',
    'ConversationState', 'Phase', 'Saved', 'Unsaved', 'default_title', 'display_time',
    'SessionSyncClient', 'SendOutcome', 'dedupe_sessions', 'CONNECTION_FALLBACK', 'NO_REPLY_FALLBACK',
]
