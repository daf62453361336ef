"""CSRF check datatypes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class FailureReason(str, Enum):
    MISSING_SESSION_TOKEN = "missing_session_token"
    MISSING_FORM_TOKEN = "missing_form_token"
    ORIGIN_MISMATCH = "origin_mismatch"
    TOKEN_MISMATCH = "token_mismatch"
    TOKEN_EXPIRED = "token_expired"


@dataclass(frozen=True)
class CheckOptions:
    """Per-call policy for :meth:`nocsrf.validator.NoCsrf.check`.

    ``max_age_seconds=None`` means the token never expires. ``reusable``
    keeps the session entry after the check instead of consuming it.
    """

    throw_on_failure: bool = False
    max_age_seconds: Optional[int] = None
    reusable: bool = False

    def __post_init__(self) -> None:
        if self.max_age_seconds is not None and self.max_age_seconds < 0:
            raise ValueError(f"max_age_seconds must be non-negative, got {self.max_age_seconds}.")


@dataclass(frozen=True)
class CheckResult:
    valid: bool
    reason: str
    failures: Tuple[FailureReason, ...] = ()

    @classmethod
    def from_failures(cls, failures: Tuple[FailureReason, ...]) -> "CheckResult":
        if not failures:
            return cls(valid=True, reason="ok")
        return cls(valid=False, reason=failures[0].value, failures=failures)

    @property
    def first_failure(self) -> Optional[FailureReason]:
        return self.failures[0] if self.failures else None
