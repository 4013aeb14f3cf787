"""
Short Code Generator

Produces fixed-length random identifiers from the base62 alphabet.

Design Decisions:
- Base62 alphabet [0-9a-zA-Z]: URL-safe, no padding characters
- Random rather than counter-based: codes are not enumerable and no
  coordination between instances is needed
- Not cryptographically secure; uniqueness is guaranteed by the store's
  unique index plus a bounded retry in the creation service, not by entropy
- Length is a parameter: raising it later does not invalidate stored codes

Collision odds at the default length of 8 (62^8 ≈ 2.2e14 codes) with ten
million stored mappings are about 1 in 20 million per attempt.
"""

import random
from typing import Optional

BASE62_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"

DEFAULT_CODE_LENGTH = 8


class ShortCodeGenerator:
    """Random short code source with a documented alphabet and length."""

    def __init__(
        self,
        length: int = DEFAULT_CODE_LENGTH,
        alphabet: str = BASE62_ALPHABET,
        rng: Optional[random.Random] = None,
    ):
        if length < 1:
            raise ValueError("Short code length must be positive")
        if len(set(alphabet)) != len(alphabet) or len(alphabet) < 2:
            raise ValueError("Alphabet must contain at least two distinct characters")
        self.length = length
        self.alphabet = alphabet
        self._rng = rng or random.Random()

    def generate(self) -> str:
        """Return a new random code of exactly `length` characters."""
        return "".join(self._rng.choices(self.alphabet, k=self.length))

    def __repr__(self) -> str:
        return f"ShortCodeGenerator(length={self.length}, alphabet_size={len(self.alphabet)})"
