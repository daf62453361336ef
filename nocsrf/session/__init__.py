"""Session store adapters and persistence backends."""

from .backends import (
    InMemorySessionBackend,
    PostgresSessionBackend,
    SessionBackend,
    create_session_backend_from_env,
)
from .store import InMemorySessionStore, MappingSessionStore, SessionStore

__all__ = [
    "SessionStore",
    "MappingSessionStore",
    "InMemorySessionStore",
    "SessionBackend",
    "InMemorySessionBackend",
    "PostgresSessionBackend",
    "create_session_backend_from_env",
]
