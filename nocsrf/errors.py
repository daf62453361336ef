"""Typed failures raised by a throwing CSRF check."""

from __future__ import annotations

from typing import Dict, Type

from .token.types import FailureReason


class CsrfError(Exception):
    """Base class for CSRF validation failures."""

    reason: FailureReason
    message: str = "CSRF check failed."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class MissingSessionTokenError(CsrfError):
    reason = FailureReason.MISSING_SESSION_TOKEN
    message = "Missing CSRF session token."


class MissingFormTokenError(CsrfError):
    reason = FailureReason.MISSING_FORM_TOKEN
    message = "Missing CSRF form token."


class OriginMismatchError(CsrfError):
    reason = FailureReason.ORIGIN_MISMATCH
    message = "Form origin does not match token origin."


class TokenMismatchError(CsrfError):
    reason = FailureReason.TOKEN_MISMATCH
    message = "Invalid CSRF token."


class TokenExpiredError(CsrfError):
    reason = FailureReason.TOKEN_EXPIRED
    message = "CSRF token has expired."


_ERRORS: Dict[FailureReason, Type[CsrfError]] = {
    cls.reason: cls
    for cls in (
        MissingSessionTokenError,
        MissingFormTokenError,
        OriginMismatchError,
        TokenMismatchError,
        TokenExpiredError,
    )
}


def error_for(reason: FailureReason) -> CsrfError:
    """Build the exception that reports ``reason``."""
    return _ERRORS[reason]()
