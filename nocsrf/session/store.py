"""Synchronous session store adapters used by the validator."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, MutableMapping, Optional


class SessionStore(ABC):
    """One user's session state, as seen by the validator."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value stored at ``key`` or ``None``."""

    @abstractmethod
    def set(self, key: str, value: Optional[str]) -> None:
        """Store ``value`` at ``key``; ``None`` clears the entry."""


class MappingSessionStore(SessionStore):
    """Adapter over any mutable mapping, e.g. a web framework session."""

    def __init__(self, data: MutableMapping[str, Any]) -> None:
        self.data = data

    def get(self, key: str) -> Optional[str]:
        value = self.data.get(key)
        if value is None or isinstance(value, str):
            return value
        raise TypeError(f"Session value for {key!r} must be a string, got {type(value).__name__}")

    def set(self, key: str, value: Optional[str]) -> None:
        if value is None:
            self.data.pop(key, None)
        else:
            self.data[key] = value


class InMemorySessionStore(MappingSessionStore):
    """Dict-backed session store."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        super().__init__(dict(initial or {}))
