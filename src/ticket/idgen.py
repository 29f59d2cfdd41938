"""Random ID generation for tickets."""

from __future__ import annotations

import re
import secrets
from typing import TYPE_CHECKING

from ticket.constants import (
    DEFAULT_PREFIX,
    ID_MAX_RETRIES,
    ID_SUFFIX_ALPHABET,
    ID_SUFFIX_LENGTH,
)

if TYPE_CHECKING:
    from collections.abc import Callable


def prefix_from_directory(name: str) -> str:
    """Derive an ID prefix from a project directory name.

    Multi-segment names use the first letter of each segment, single words
    use their first three characters:

        "my-cool_project" -> "mcp"
        "ticket"          -> "tic"
        "__"              -> "tk"
    """
    segments = [s for s in re.split(r"[-_\s.]+", name.lower()) if s]
    if len(segments) > 1:
        prefix = "".join(s[0] for s in segments)
    elif segments:
        prefix = segments[0][:3]
    else:
        prefix = ""
    prefix = "".join(c for c in prefix if c.isalnum())
    return prefix or DEFAULT_PREFIX


def random_suffix(length: int = ID_SUFFIX_LENGTH) -> str:
    """Generate a random base36 suffix."""
    return "".join(secrets.choice(ID_SUFFIX_ALPHABET) for _ in range(length))


class IDGenerator:
    """Generates ``<prefix>-<suffix>`` IDs, retrying on collision."""

    def __init__(
        self,
        prefix: str,
        exists: Callable[[str], bool],
        suffix_length: int = ID_SUFFIX_LENGTH,
    ) -> None:
        """Initialize the ID generator.

        Args:
            prefix: Prefix for generated IDs
            exists: Predicate telling whether an ID is already taken
            suffix_length: Length of the random part
        """
        self.prefix = prefix
        self.exists = exists
        self.suffix_length = suffix_length
        self.max_retries = ID_MAX_RETRIES

    def generate(self) -> str:
        """Generate an ID not yet taken.

        After ``max_retries`` collisions the suffix is widened by one
        character and the search continues, so a crowded prefix never
        fails outright.
        """
        length = self.suffix_length
        while True:
            for _ in range(self.max_retries):
                candidate = f"{self.prefix}-{random_suffix(length)}"
                if not self.exists(candidate):
                    return candidate
            length += 1
