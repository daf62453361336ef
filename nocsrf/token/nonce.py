"""Random nonce source for CSRF tokens."""

from __future__ import annotations

import random
import secrets
from typing import Optional

# Historical seed: 'k' is missing, 'q' appears twice and 't'/'s' are swapped.
NONCE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijqlmnopqrtsuvwxyz0123456789"
NONCE_LENGTH = 32


class NonceSource:
    """Draw fixed-length random strings from the nonce alphabet."""

    def __init__(self, *, rng: Optional[random.Random] = None, alphabet: str = NONCE_ALPHABET) -> None:
        if not alphabet:
            raise ValueError("Nonce alphabet must not be empty.")
        self._rng = rng or secrets.SystemRandom()
        self.alphabet = alphabet

    def next(self, length: int = NONCE_LENGTH) -> str:
        """Return ``length`` characters chosen independently and uniformly."""
        if length < 0:
            raise ValueError(f"Nonce length must be non-negative, got {length}.")
        return "".join(self._rng.choice(self.alphabet) for _ in range(length))
