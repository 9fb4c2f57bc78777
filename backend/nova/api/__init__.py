"""API module."""

from .chats import router as chats_router
from .completion import router as completion_router

__all__ = ['chats_router', 'completion_router']
