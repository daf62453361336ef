"""Origin fingerprints binding a token to the requesting browser."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..utils.hashing import sha256_hex

# Width of a SHA-256 hex digest; used for both encoding and decoding.
FINGERPRINT_WIDTH = 64


def compute_fingerprint(remote_address: str, user_agent: str) -> str:
    """Return the SHA-256 hex digest of ``remote_address + user_agent``."""
    return sha256_hex(remote_address + user_agent)


def _text(environ: Mapping[str, Any], name: str) -> str:
    value = environ.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class RequestOrigin:
    """Network identity of the request a token is issued to or checked for."""

    remote_address: str
    user_agent: str

    @classmethod
    def from_environ(cls, environ: Mapping[str, Any]) -> "RequestOrigin":
        """Build an origin from a WSGI/CGI style environment mapping."""
        return cls(
            remote_address=_text(environ, "REMOTE_ADDR"),
            user_agent=_text(environ, "HTTP_USER_AGENT"),
        )

    def fingerprint(self) -> str:
        return compute_fingerprint(self.remote_address, self.user_agent)
