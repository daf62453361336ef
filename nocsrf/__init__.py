"""NoCSRF package.

Session-bound, one-time anti-CSRF tokens with optional origin binding and
expiry.
"""

from .config import NoCsrfConfig
from .errors import (
    CsrfError,
    MissingFormTokenError,
    MissingSessionTokenError,
    OriginMismatchError,
    TokenExpiredError,
    TokenMismatchError,
)
from .session import InMemorySessionStore, MappingSessionStore, SessionStore
from .token import CheckOptions, CheckResult, FailureReason, RequestOrigin
from .validator import NoCsrf

__all__ = [
    "NoCsrf",
    "NoCsrfConfig",
    "CheckOptions",
    "CheckResult",
    "FailureReason",
    "RequestOrigin",
    "SessionStore",
    "MappingSessionStore",
    "InMemorySessionStore",
    "CsrfError",
    "MissingSessionTokenError",
    "MissingFormTokenError",
    "OriginMismatchError",
    "TokenMismatchError",
    "TokenExpiredError",
]
