"""Pack and unpack the fields of a CSRF token.

A token is the standard base64 encoding of::

    issue_time (10 ASCII digits) + origin fingerprint (optional) + nonce

The layout carries no length field, so the origin-check setting used to
decode must be the one that was active when the token was generated.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Optional

from .origin import FINGERPRINT_WIDTH

ISSUE_TIME_WIDTH = 10
_MAX_ISSUE_TIME = 10**ISSUE_TIME_WIDTH - 1


@dataclass(frozen=True)
class DecodedToken:
    """Fields recovered from a token string.

    ``issue_time`` is ``None`` when the token could not be decoded or its
    time slice is not a number.
    """

    issue_time: Optional[int] = None
    fingerprint: str = ""
    nonce: str = ""


def encode_token(issue_time: int, fingerprint: str, nonce: str) -> str:
    if not 0 <= issue_time <= _MAX_ISSUE_TIME:
        raise ValueError(f"issue_time must fit in {ISSUE_TIME_WIDTH} digits, got {issue_time}.")
    raw = f"{issue_time:0{ISSUE_TIME_WIDTH}d}{fingerprint}{nonce}"
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def decode_token(token: str, *, origin_check: bool) -> DecodedToken:
    """Slice a token into its fields; malformed input yields empty fields."""
    try:
        raw = base64.b64decode(token.encode("ascii"), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError):
        return DecodedToken()

    time_part = raw[:ISSUE_TIME_WIDTH]
    issue_time = int(time_part) if len(time_part) == ISSUE_TIME_WIDTH and time_part.isdigit() else None

    offset = ISSUE_TIME_WIDTH
    fingerprint = ""
    if origin_check:
        fingerprint = raw[offset : offset + FINGERPRINT_WIDTH]
        offset += FINGERPRINT_WIDTH
    return DecodedToken(issue_time=issue_time, fingerprint=fingerprint, nonce=raw[offset:])
