import logging
import random

import pytest

from nocsrf import (
    CheckOptions,
    FailureReason,
    InMemorySessionStore,
    MissingFormTokenError,
    MissingSessionTokenError,
    NoCsrf,
    NoCsrfConfig,
    OriginMismatchError,
    RequestOrigin,
    TokenExpiredError,
    TokenMismatchError,
)
from nocsrf.token import NonceSource

T0 = 1_700_000_000
BROWSER_A = RequestOrigin(remote_address="192.0.2.10", user_agent="Mozilla/5.0 (A)")
BROWSER_B = RequestOrigin(remote_address="198.51.100.20", user_agent="Mozilla/5.0 (B)")


class FakeClock:
    def __init__(self, now: int = T0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


def make_csrf(session=None, *, origin=None, clock=None, **kwargs) -> NoCsrf:
    return NoCsrf(
        session if session is not None else InMemorySessionStore(),
        origin=origin,
        clock=clock or FakeClock(),
        nonce_source=NonceSource(rng=random.Random(1234)),
        **kwargs,
    )


def test_generate_then_check_round_trip() -> None:
    csrf = make_csrf()
    token = csrf.generate("csrf_token")
    assert csrf.check("csrf_token", {"csrf_token": token}) is True


def test_generate_stores_token_under_prefixed_key() -> None:
    session = InMemorySessionStore()
    csrf = make_csrf(session)
    token = csrf.generate("login")
    assert session.data == {"csrf_login": token}

    custom = make_csrf(session, config=NoCsrfConfig(session_prefix="xsrf:"))
    other = custom.generate("login")
    assert session.get("xsrf:login") == other


def test_generate_overwrites_previous_token() -> None:
    csrf = make_csrf()
    first = csrf.generate("k")
    second = csrf.generate("k")
    assert first != second
    assert csrf.check("k", {"k": first}) is False


def test_token_is_one_time_use() -> None:
    csrf = make_csrf()
    token = csrf.generate("k")
    assert csrf.check("k", {"k": token}) is True
    assert csrf.check("k", {"k": token}) is False

    with pytest.raises(MissingSessionTokenError, match="Missing CSRF session token."):
        csrf.check("k", {"k": token}, CheckOptions(throw_on_failure=True))


def test_reusable_token_passes_repeatedly() -> None:
    csrf = make_csrf()
    token = csrf.generate("k")
    options = CheckOptions(reusable=True)
    assert csrf.check("k", {"k": token}, options) is True
    assert csrf.check("k", {"k": token}, options) is True
    assert csrf.check("k", {"k": token}) is True
    assert csrf.check("k", {"k": token}) is False


def test_expiration_boundary() -> None:
    clock = FakeClock()
    csrf = make_csrf(clock=clock)
    options = CheckOptions(throw_on_failure=True, max_age_seconds=600, reusable=True)
    token = csrf.generate("k")

    clock.now = T0 + 600
    assert csrf.check("k", {"k": token}, options) is True

    clock.now = T0 + 601
    with pytest.raises(TokenExpiredError, match="CSRF token has expired."):
        csrf.check("k", {"k": token}, options)


def test_tampered_form_token_is_rejected_and_consumes_session() -> None:
    session = InMemorySessionStore()
    csrf = make_csrf(session)
    csrf.generate("k")

    with pytest.raises(TokenMismatchError, match="Invalid CSRF token."):
        csrf.check("k", {"k": "whateverkey"}, CheckOptions(throw_on_failure=True))
    assert session.get("csrf_k") is None


def test_origin_binding() -> None:
    session = InMemorySessionStore()
    issuer = make_csrf(session, origin=BROWSER_A)
    issuer.enable_origin_check()
    token = issuer.generate("k")

    other = make_csrf(session, origin=BROWSER_B, config=NoCsrfConfig(origin_check=True))
    with pytest.raises(OriginMismatchError, match="Form origin does not match token origin."):
        other.check("k", {"k": token}, CheckOptions(throw_on_failure=True, reusable=True))

    same = make_csrf(session, origin=BROWSER_A, config=NoCsrfConfig(origin_check=True))
    assert same.check("k", {"k": token}) is True


def test_origin_check_requires_request_origin() -> None:
    csrf = make_csrf()
    csrf.enable_origin_check()
    assert csrf.origin_check is True
    with pytest.raises(ValueError):
        csrf.generate("k")


def test_missing_session_token() -> None:
    csrf = make_csrf()
    assert csrf.check("k", {"k": "anything"}) is False
    with pytest.raises(MissingSessionTokenError):
        csrf.check("k", {"k": "anything"}, CheckOptions(throw_on_failure=True))


def test_missing_form_token_still_consumes_session() -> None:
    session = InMemorySessionStore()
    csrf = make_csrf(session)
    csrf.generate("k")
    with pytest.raises(MissingFormTokenError, match="Missing CSRF form token."):
        csrf.check("k", {"other": "value"}, CheckOptions(throw_on_failure=True))
    assert session.get("csrf_k") is None


def test_evaluate_collects_every_failure_in_order() -> None:
    clock = FakeClock()
    csrf = make_csrf(clock=clock)
    csrf.generate("k")
    clock.now = T0 + 120

    result = csrf.evaluate("k", {"k": "whateverkey"}, CheckOptions(max_age_seconds=60))
    assert result.valid is False
    assert result.failures == (FailureReason.TOKEN_MISMATCH, FailureReason.TOKEN_EXPIRED)
    assert result.reason == "token_mismatch"


def test_throwing_check_reports_first_failure() -> None:
    clock = FakeClock()
    csrf = make_csrf(clock=clock)
    csrf.generate("k")
    clock.now = T0 + 120

    with pytest.raises(TokenMismatchError) as excinfo:
        csrf.check("k", {"k": "whateverkey"}, CheckOptions(throw_on_failure=True, max_age_seconds=60))
    assert excinfo.value.reason is FailureReason.TOKEN_MISMATCH


def test_evaluate_success_result() -> None:
    csrf = make_csrf()
    token = csrf.generate("k")
    result = csrf.evaluate("k", {"k": token})
    assert result.valid is True
    assert result.reason == "ok"
    assert result.failures == ()
    assert result.first_failure is None


def test_malformed_stored_token_counts_as_expired() -> None:
    session = InMemorySessionStore({"csrf_k": "whateverkey"})
    csrf = make_csrf(session)
    result = csrf.evaluate("k", {"k": "whateverkey"}, CheckOptions(max_age_seconds=3600))
    assert result.failures == (FailureReason.TOKEN_EXPIRED,)


def test_malformed_stored_token_fails_origin_check() -> None:
    session = InMemorySessionStore({"csrf_k": "whateverkey"})
    csrf = make_csrf(session, origin=BROWSER_A, config=NoCsrfConfig(origin_check=True))
    result = csrf.evaluate("k", {"k": "whateverkey"})
    assert result.failures == (FailureReason.ORIGIN_MISMATCH,)


def test_form_values_are_typed_at_the_boundary() -> None:
    csrf = make_csrf()
    token = csrf.generate("k")
    assert csrf.check("k", {"k": token.encode("ascii")}, CheckOptions(reusable=True)) is True
    with pytest.raises(TypeError):
        csrf.check("k", {"k": 12345})


def test_check_options_reject_negative_max_age() -> None:
    with pytest.raises(ValueError):
        CheckOptions(max_age_seconds=-1)


def test_failed_check_is_logged_without_token(caplog: pytest.LogCaptureFixture) -> None:
    csrf = make_csrf()
    token = csrf.generate("k")
    with caplog.at_level(logging.WARNING, logger="nocsrf.validator"):
        csrf.check("k", {"k": "whateverkey"})
    assert "token_mismatch" in caplog.text
    assert token not in caplog.text


def test_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NOCSRF_ORIGIN_CHECK", "true")
    monkeypatch.setenv("NOCSRF_SESSION_PREFIX", "anti_")
    config = NoCsrfConfig.from_env()
    assert config.origin_check is True
    assert config.session_prefix == "anti_"

    monkeypatch.delenv("NOCSRF_ORIGIN_CHECK")
    monkeypatch.delenv("NOCSRF_SESSION_PREFIX")
    assert NoCsrfConfig.from_env() == NoCsrfConfig()


def test_non_ascii_nonce_alphabet_keeps_issue_time() -> None:
    csrf = NoCsrf(InMemorySessionStore(), clock=FakeClock(), nonce_source=NonceSource(alphabet="é"))
    token = csrf.generate("k")
    result = csrf.evaluate("k", {"k": token}, CheckOptions(max_age_seconds=600))
    assert result.valid is True


def test_missing_origin_leaves_session_entry_intact() -> None:
    session = InMemorySessionStore()
    csrf = make_csrf(session)
    token = csrf.generate("k")
    csrf.enable_origin_check()

    with pytest.raises(ValueError):
        csrf.check("k", {"k": "x"})
    assert session.get("csrf_k") == token


def test_missing_form_token_returns_false_without_throwing() -> None:
    session = InMemorySessionStore()
    csrf = make_csrf(session)
    csrf.generate("k")
    assert csrf.check("k", {"other": "value"}) is False
    assert session.get("csrf_k") is None
