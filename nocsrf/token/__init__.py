"""CSRF token building blocks: nonce, origin fingerprint and codec."""

from .codec import DecodedToken, decode_token, encode_token
from .nonce import NONCE_ALPHABET, NONCE_LENGTH, NonceSource
from .origin import FINGERPRINT_WIDTH, RequestOrigin, compute_fingerprint
from .types import CheckOptions, CheckResult, FailureReason

__all__ = [
    "DecodedToken",
    "decode_token",
    "encode_token",
    "NONCE_ALPHABET",
    "NONCE_LENGTH",
    "NonceSource",
    "FINGERPRINT_WIDTH",
    "RequestOrigin",
    "compute_fingerprint",
    "CheckOptions",
    "CheckResult",
    "FailureReason",
]
