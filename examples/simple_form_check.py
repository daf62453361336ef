"""Example: guard a form post with an origin-bound, expiring one-time token."""

from __future__ import annotations

from nocsrf import CheckOptions, CsrfError, InMemorySessionStore, NoCsrf, RequestOrigin


def main() -> None:
    session = InMemorySessionStore()
    environ = {"REMOTE_ADDR": "203.0.113.7", "HTTP_USER_AGENT": "Mozilla/5.0 (example)"}

    csrf = NoCsrf(session, origin=RequestOrigin.from_environ(environ))
    csrf.enable_origin_check()
    token = csrf.generate("csrf_token")
    print("Hidden field value:", token)

    # Next request from the same browser submits the form.
    form = {"csrf_token": token, "comment": "hello"}
    try:
        csrf.check("csrf_token", form, CheckOptions(throw_on_failure=True, max_age_seconds=600))
        print("First submission accepted.")
    except CsrfError as exc:
        print("First submission rejected:", exc)

    # The token was consumed by the first check.
    print("Replay accepted:", csrf.check("csrf_token", form))

    # Same token, different browser.
    csrf.generate("csrf_token")
    attacker = NoCsrf(session, origin=RequestOrigin("198.51.100.9", "curl/8.0"))
    attacker.enable_origin_check()
    result = attacker.evaluate("csrf_token", {"csrf_token": session.get(csrf.session_key("csrf_token")) or ""})
    print("Foreign origin result:", result.reason)


if __name__ == "__main__":
    main()
