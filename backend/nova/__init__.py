"""NOVA Chat - chat session persistence and synchronization."""

__version__ = "1.0.0"
