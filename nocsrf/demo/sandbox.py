"""Demo form page: one legitimate form and one forged copy."""

from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Mapping, Optional

from nocsrf import CheckOptions, CsrfError, NoCsrf, NoCsrfConfig, RequestOrigin
from nocsrf.session import SessionBackend, create_session_backend_from_env

TOKEN_FIELD = "csrf_token"
FORGED_TOKEN = "whateverkey"

PAGE_TEMPLATE = """<h1>CSRF sandbox</h1>
<pre style="color: red">{result}</pre>
<form name="csrf_form" action="" method="post">
    <h2>Form using generated token.</h2>
    <input type="hidden" name="{field}" value="{token}">
    <input type="text" name="field" value="somevalue">
    <input type="submit" value="Send form">
</form>
<form name="nocsrf_form" action="" method="post">
    <h2>Copied form simulating CSRF attack.</h2>
    <input type="hidden" name="{field}" value="{forged}">
    <input type="text" name="field" value="somevalue">
    <input type="submit" value="Send form">
</form>
"""


@dataclass(frozen=True)
class SandboxResponse:
    result: str
    token: str
    body: str
    # "OK"/"NOPE" from the reusable non-throwing check; None when nothing was posted.
    functional: Optional[str] = None


class FormSandbox:
    """Handle sandbox page requests against a persisted session."""

    def __init__(
        self,
        *,
        backend: Optional[SessionBackend] = None,
        config: Optional[NoCsrfConfig] = None,
        max_age_seconds: int = 60 * 10,
    ) -> None:
        self.backend = backend or create_session_backend_from_env()
        self.config = config or NoCsrfConfig.from_env()
        self.max_age_seconds = max_age_seconds

    async def close(self) -> None:
        await self.backend.close()

    async def handle(
        self,
        *,
        session_id: str,
        origin: RequestOrigin,
        form: Optional[Mapping[str, str]] = None,
    ) -> SandboxResponse:
        """Process one page load; ``form`` is the POST body, if any."""
        session = await self.backend.load(session_id)
        csrf = NoCsrf(session, origin=origin, config=self.config)

        functional: Optional[str] = None
        if form and "field" in form:
            try:
                csrf.check(
                    TOKEN_FIELD,
                    form,
                    CheckOptions(throw_on_failure=True, max_age_seconds=self.max_age_seconds),
                )
                # form parsing, DB inserts, etc. would happen here
                result = "CSRF check passed. Form parsed."
            except CsrfError as exc:
                result = f"{exc} Form ignored."

            # The one-time check above already consumed the token, so this reports NOPE.
            passed = csrf.check(TOKEN_FIELD, form, CheckOptions(reusable=True))
            functional = "OK" if passed else "NOPE"
        else:
            result = "No post data yet."

        token = csrf.generate(TOKEN_FIELD)
        await self.backend.save(session_id, session)
        return SandboxResponse(result=result, token=token, body=render_page(result, token), functional=functional)


def render_page(result: str, token: str) -> str:
    return PAGE_TEMPLATE.format(
        result=html.escape(result),
        field=TOKEN_FIELD,
        token=html.escape(token, quote=True),
        forged=FORGED_TOKEN,
    )
