"""Session-bound CSRF token generation and checking."""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional

from .config import NoCsrfConfig
from .errors import error_for
from .session.store import SessionStore
from .token.codec import decode_token, encode_token
from .token.nonce import NonceSource
from .token.origin import RequestOrigin
from .token.types import CheckOptions, CheckResult, FailureReason
from .utils.hashing import constant_time_equals
from .utils.time import unix_now

logger = logging.getLogger(__name__)


def _form_token(form_data: Mapping[str, Any], key: str) -> Optional[str]:
    value = form_data.get(key)
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    raise TypeError(f"Form value for {key!r} must be a string, got {type(value).__name__}")


class NoCsrf:
    """Generate one-time CSRF tokens into a session and check submitted forms.

    The validator never owns session state: it reads and writes a single
    entry of the injected :class:`SessionStore`. ``origin`` is the current
    request's identity and is only needed once origin checking is enabled.
    """

    def __init__(
        self,
        session: SessionStore,
        *,
        origin: Optional[RequestOrigin] = None,
        config: Optional[NoCsrfConfig] = None,
        nonce_source: Optional[NonceSource] = None,
        clock: Callable[[], int] = unix_now,
    ) -> None:
        self.session = session
        self.origin = origin
        self.config = config or NoCsrfConfig()
        self.nonce_source = nonce_source or NonceSource()
        self.clock = clock
        self._origin_check = self.config.origin_check

    @property
    def origin_check(self) -> bool:
        return self._origin_check

    def enable_origin_check(self) -> None:
        """Bind tokens to the requester's remote address and user agent."""
        self._origin_check = True

    def session_key(self, key: str) -> str:
        return f"{self.config.session_prefix}{key}"

    def generate(self, key: str) -> str:
        """Create a token, store it in the session under ``key`` and return it.

        The returned value belongs in a hidden form field named ``key``.
        """
        fingerprint = self._request_fingerprint() if self._origin_check else ""
        nonce = self.nonce_source.next(self.config.nonce_length)
        token = encode_token(self.clock(), fingerprint, nonce)
        self.session.set(self.session_key(key), token)
        logger.debug("Generated CSRF token for key=%s origin_check=%s", key, self._origin_check)
        return token

    def evaluate(self, key: str, form_data: Mapping[str, Any], options: Optional[CheckOptions] = None) -> CheckResult:
        """Run every check and collect the failures in order.

        A non-reusable check clears the session entry whatever the outcome,
        so a token can be tried at most once.
        """
        options = options or CheckOptions()
        session_key = self.session_key(key)
        failures: List[FailureReason] = []
        # Resolved before the session is touched so a missing origin leaves it intact.
        request_fingerprint = self._request_fingerprint() if self._origin_check else ""

        stored = self.session.get(session_key)
        if stored is None:
            failures.append(FailureReason.MISSING_SESSION_TOKEN)

        submitted = _form_token(form_data, key)
        if submitted is None:
            failures.append(FailureReason.MISSING_FORM_TOKEN)

        if stored is not None:
            if not options.reusable:
                self.session.set(session_key, None)

            decoded = decode_token(stored, origin_check=self._origin_check)

            if self._origin_check and not constant_time_equals(request_fingerprint, decoded.fingerprint):
                failures.append(FailureReason.ORIGIN_MISMATCH)

            if submitted is not None and not constant_time_equals(submitted, stored):
                failures.append(FailureReason.TOKEN_MISMATCH)

            if options.max_age_seconds is not None and (
                decoded.issue_time is None or decoded.issue_time + options.max_age_seconds < self.clock()
            ):
                failures.append(FailureReason.TOKEN_EXPIRED)

        result = CheckResult.from_failures(tuple(failures))
        if not result.valid:
            logger.warning(
                "CSRF check failed for key=%s: %s",
                key,
                ", ".join(reason.value for reason in result.failures),
            )
        return result

    def check(self, key: str, form_data: Mapping[str, Any], options: Optional[CheckOptions] = None) -> bool:
        """Return ``False`` if a CSRF attack is detected, ``True`` otherwise.

        With ``options.throw_on_failure`` the first failure is raised as a
        :class:`nocsrf.errors.CsrfError` subclass instead.
        """
        options = options or CheckOptions()
        result = self.evaluate(key, form_data, options)
        if result.valid:
            return True
        if options.throw_on_failure:
            assert result.first_failure is not None
            raise error_for(result.first_failure)
        return False

    def _request_fingerprint(self) -> str:
        if self.origin is None:
            raise ValueError("Origin check is enabled but no request origin was supplied.")
        return self.origin.fingerprint()
