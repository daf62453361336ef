"""Utility helpers for hashing and time operations."""

from .hashing import constant_time_equals, sha256_hex
from .time import unix_now, utc_now

__all__ = ["sha256_hex", "constant_time_equals", "unix_now", "utc_now"]
