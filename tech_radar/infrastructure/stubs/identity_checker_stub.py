"""In-memory identity checker resolving tokens from a fixed map."""

from __future__ import annotations

from tech_radar.application.ports.identity_checker import IdentityCheckerProtocol


class IdentityCheckerStub(IdentityCheckerProtocol):
    """Resolves tokens configured up front (RADAR_IDENTITY_TOKENS)."""

    def __init__(self, tokens: dict[str, str] | None = None) -> None:
        self._tokens = dict(tokens or {})

    async def resolve_user(self, token: str) -> str | None:
        return self._tokens.get(token)

    def add_token(self, token: str, user_id: str) -> None:
        self._tokens[token] = user_id
