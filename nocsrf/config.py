"""Configuration for CSRF token generation and checking."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .token.nonce import NONCE_LENGTH

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class NoCsrfConfig:
    """Validator settings shared by every generate/check pair."""

    origin_check: bool = False
    session_prefix: str = "csrf_"
    nonce_length: int = NONCE_LENGTH

    @classmethod
    def from_env(cls) -> "NoCsrfConfig":
        """Read ``NOCSRF_ORIGIN_CHECK`` and ``NOCSRF_SESSION_PREFIX``."""
        return cls(
            origin_check=os.getenv("NOCSRF_ORIGIN_CHECK", "0").strip().lower() in _TRUTHY,
            session_prefix=os.getenv("NOCSRF_SESSION_PREFIX", "csrf_"),
        )
