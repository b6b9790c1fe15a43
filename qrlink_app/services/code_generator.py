"""
Random short code generation.

Alphabet: digits 2-9, lowercase a-z without ``l`` and ``o``, uppercase A-Z
without ``I`` and ``O``. The characters 0, 1, l, o, I and O are left out
because they are easy to misread in print and in QR captions. That gives
56 symbols, so the default 7-character code has 56**7 (about 1.7e12)
possible values.
"""

import secrets
import string

UNAMBIGUOUS_ALPHABET = (
    "23456789"
    + "".join(c for c in string.ascii_lowercase if c not in "lo")
    + "".join(c for c in string.ascii_uppercase if c not in "IO")
)


class CodeGenerator:
    """
    Draws codes uniformly from the alphabet using the OS CSPRNG.

    Knows nothing about stored codes: a returned code may already be taken,
    and collision handling belongs to the caller.
    """

    def __init__(self, alphabet: str = UNAMBIGUOUS_ALPHABET):
        if not alphabet:
            raise ValueError("alphabet must not be empty")
        self.alphabet = alphabet

    def generate(self, length: int) -> str:
        """Return a random code of exactly ``length`` characters"""
        if not isinstance(length, int) or length <= 0:
            raise ValueError(f"length must be a positive integer (given: {length!r})")
        return "".join(secrets.choice(self.alphabet) for _ in range(length))
