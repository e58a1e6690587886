"""
Key derivation for auto-generated aliases.

The same link always hashes to the same key, so adding a link twice
returns the alias it already has instead of creating a second one.
"""

import base64
import hashlib
from typing import Callable, Collection, Mapping, Optional, Tuple

from shortlink_app.errors import KeyspaceExhausted
from shortlink_app.models.entry import Entry

# Paths served by the app itself, so an alias with this name could never redirect
RESERVED_KEYS = frozenset({"api", "docs", "redoc", "health"})


def blake2b_64(link: str) -> bytes:
    """
    Fixed 64-bit hash of a link.

    No key and no salt: the result must be identical across restarts,
    which rules out the builtin hash() (randomized per process).
    """
    return hashlib.blake2b(link.encode("utf-8"), digest_size=8).digest()


class KeyGenerator:
    """
    Hash-prefix key strategy.

    Process:
    1. Hash the link to 8 bytes
    2. Encode as URL-safe base64 without padding (11 characters)
    3. Try prefixes of 4, 5, ... 11 characters until one is free (reserved names skipped)

    Pros: deterministic, short keys, duplicate links collapse onto one key
    Cons: a key may grow past 4 characters when prefixes collide
    """

    MIN_LENGTH = 4

    def __init__(
        self,
        hash_function: Callable[[str], bytes] = blake2b_64,
        reserved: Collection[str] = RESERVED_KEYS
    ):
        self.hash_function = hash_function
        self.reserved = reserved

    def encode(self, link: str) -> str:
        """Full-length key for a link (every candidate is a prefix of it)"""
        digest = self.hash_function(link)
        return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")

    def derive(self, link: str, forward: Mapping[str, Entry]) -> Tuple[str, Optional[Entry]]:
        """
        Pick the alias for a link.

        Args:
            link: Target URL
            forward: Current alias -> Entry index

        Returns:
            (alias, None) when alias is free,
            (alias, entry) when the link is already stored under alias

        Raises:
            KeyspaceExhausted: every prefix belongs to a different link or is reserved
        """
        full_key = self.encode(link)

        for length in range(self.MIN_LENGTH, len(full_key) + 1):
            candidate = full_key[:length]
            if candidate in self.reserved:
                continue

            existing = forward.get(candidate)

            if existing is None:
                return candidate, None

            if existing.link == link:
                # Duplicate add
                return candidate, existing

        raise KeyspaceExhausted(link)
