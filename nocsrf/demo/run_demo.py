"""Run the form sandbox end to end: legit post, replay and forgery."""

from __future__ import annotations

import asyncio
import logging

from nocsrf import RequestOrigin

from .sandbox import FORGED_TOKEN, TOKEN_FIELD, FormSandbox


async def main() -> None:
    sandbox = FormSandbox()
    origin = RequestOrigin(remote_address="127.0.0.1", user_agent="nocsrf-demo/1.0")
    session_id = "demo-session"
    try:
        page = await sandbox.handle(session_id=session_id, origin=origin)
        print("FIRST LOAD:", page.result)

        legit_form = {TOKEN_FIELD: page.token, "field": "somevalue"}
        posted = await sandbox.handle(session_id=session_id, origin=origin, form=legit_form)
        print("LEGIT POST:", posted.result, posted.functional)

        # Posting the already-consumed token again.
        replay = await sandbox.handle(session_id=session_id, origin=origin, form=legit_form)
        print("REPLAY POST:", replay.result)

        forged = await sandbox.handle(
            session_id=session_id,
            origin=origin,
            form={TOKEN_FIELD: FORGED_TOKEN, "field": "somevalue"},
        )
        print("FORGED POST:", forged.result)
    finally:
        await sandbox.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    asyncio.run(main())
