"""Identity check port.

Resolves a caller token to the acting user's identifier. The radar treats
the identifier as an opaque string and only compares it to recommendation
authors.
"""

from __future__ import annotations

from typing import Protocol


class IdentityCheckerProtocol(Protocol):
    """Protocol for resolving caller tokens."""

    async def resolve_user(self, token: str) -> str | None:
        """Return the user id for a token, or None if the token is unknown."""
        ...
