"""
Short code generation strategies for URL shortener.
Uses Strategy Pattern so the service can be handed a different generator
(e.g. a deterministic one in tests).
"""

import base64
import math
import secrets
from abc import ABC, abstractmethod

from shortlink_app.exceptions import GenerationError


class ShortCodeStrategy(ABC):
    """Abstract base class for short code generation strategies"""

    @abstractmethod
    def generate(self, length: int) -> str:
        """
        Generate a candidate short code.

        Args:
            length: Exact number of characters to return

        Returns:
            A short code string. Uniqueness is NOT guaranteed here; the
            service checks candidates against the store.
        """
        pass


class SecureRandomShortCodeStrategy(ShortCodeStrategy):
    """
    Random codes over the URL-safe base64 alphabet (A-Z a-z 0-9 - _).

    Draws ceil(length * 6 / 8) + 1 bytes from the OS CSPRNG, encodes them
    without padding and truncates. Each base64 character carries 6 bits, so
    the encoded string is always longer than ``length``.

    Pros: Unpredictable, no coordination, 64^7 ≈ 4.4e12 codes at length 7
    Cons: Collisions are possible, so every candidate needs a store lookup
    """

    ALPHABET = (
        "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
        "abcdefghijklmnopqrstuvwxyz"
        "0123456789-_"
    )

    def generate(self, length: int) -> str:
        if length <= 0:
            raise ValueError(f"Short code length must be positive, got {length}")

        num_bytes = math.ceil(length * 6 / 8) + 1
        try:
            raw = secrets.token_bytes(num_bytes)
        except OSError as e:
            raise GenerationError("Random source failed while generating short code", cause=e)

        encoded = base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")
        return encoded[:length]

