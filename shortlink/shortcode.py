"""Short code generation utilities."""

import secrets
import string
from typing import Optional


class ShortCodeGenerator:
    """Generate random short codes for links."""

    # Base62 characters (alphanumeric, case-sensitive)
    BASE62_CHARS = string.ascii_lowercase + string.ascii_uppercase + string.digits

    def __init__(self, length: int = 6, alphabet: Optional[str] = None):
        """Initialize short code generator.

        Args:
            length: Length of generated codes
            alphabet: Characters codes are drawn from (defaults to base62)

        Raises:
            ValueError: If the length or alphabet cannot produce usable codes
        """
        alphabet = alphabet or self.BASE62_CHARS

        if length < 1:
            raise ValueError("Short code length must be at least 1")
        if len(alphabet) < 2:
            raise ValueError("Alphabet must contain at least 2 characters")
        if len(set(alphabet)) != len(alphabet):
            raise ValueError("Alphabet must not contain duplicate characters")

        self.length = length
        self.alphabet = alphabet

    @property
    def keyspace_size(self) -> int:
        """Number of distinct codes this generator can produce."""
        return len(self.alphabet) ** self.length

    def generate(self) -> str:
        """Generate a random short code.

        Each character is drawn uniformly from the alphabet using the
        operating system CSPRNG, so codes cannot be predicted from earlier
        ones.

        Returns:
            Random short code
        """
        return ''.join(secrets.choice(self.alphabet) for _ in range(self.length))

