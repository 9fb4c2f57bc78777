"""Storage module - provides interface and implementations for data persistence."""

from .interface import StorageInterface
from .local_storage import LocalStorage
from .session_store import SessionStore, init_session_store, get_session_store, generate_session_id

__all__ = [
    'StorageInterface', 'LocalStorage',
    'SessionStore', 'init_session_store', 'get_session_store', 'generate_session_id',
]
