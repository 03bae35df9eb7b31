"""
Short Code Generator

Produces random fixed-length short codes. The generator knows nothing about
storage: codes are not guaranteed unique, the database's primary key decides.
"""

import random

from shortener.core.types import ShortCode


class ShortCodeGenerator:
    """Generate random short codes from a configured alphabet."""

    def __init__(self, characters: str, length: int):
        """
        Args:
            characters: Alphabet to draw from (must not be empty)
            length: Number of characters per code (must be positive)

        Raises:
            ValueError: If the alphabet is empty or the length is not positive
        """
        if not characters:
            raise ValueError("Short code alphabet must not be empty")
        if length < 1:
            raise ValueError(f"Short code length must be positive, got {length}")

        self.characters = characters
        self.length = length

    def generate(self) -> ShortCode:
        """Each character is chosen uniformly and independently."""
        return ShortCode(''.join(random.choices(self.characters, k=self.length)))
