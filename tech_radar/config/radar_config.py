"""Tech radar configuration.

Environment Variables:
- RADAR_STORE_TIMEOUT_SECONDS: Default timeout for a store call (default: 10.0)
- RADAR_STORE_BACKEND: "memory" or "sql" (default: memory)
- ENVIRONMENT: "development" or "production" (default: development)
- DATABASE_URL: SQL backend URL (PostgreSQL or sqlite+aiosqlite)
- RADAR_IDENTITY_TOKENS: Comma-separated token:user pairs for the
  in-memory identity checker (default: empty)

Invalid numeric values fall back to the defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

STORE_BACKENDS = frozenset({"memory", "sql"})


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed float value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_choice_env(key: str, choices: frozenset[str], default: str) -> str:
    value = os.environ.get(key, "").strip().lower()
    return value if value in choices else default


def _parse_tokens(raw: str) -> dict[str, str]:
    tokens: dict[str, str] = {}
    for pair in raw.split(","):
        token, sep, user = pair.partition(":")
        if sep and token.strip() and user.strip():
            tokens[token.strip()] = user.strip()
    return tokens


@dataclass(frozen=True)
class RadarConfig:
    """Runtime configuration of the tech radar.

    Attributes:
        store_timeout_seconds: Timeout applied to each store call when the
            caller supplies none.
        store_backend: Which store adapters the bootstrap wires.
        environment: Controls log rendering.
        database_url: URL of the SQL backend, if any.
        identity_tokens: Token to user id map for the in-memory checker.
    """

    store_timeout_seconds: float = 10.0
    store_backend: str = "memory"
    environment: str = "development"
    database_url: str | None = None
    identity_tokens: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.store_timeout_seconds <= 0:
            raise ValueError(
                "store_timeout_seconds must be positive, "
                f"got {self.store_timeout_seconds}"
            )
        if self.store_backend not in STORE_BACKENDS:
            raise ValueError(
                f"store_backend must be one of {sorted(STORE_BACKENDS)}, "
                f"got {self.store_backend!r}"
            )
        if self.store_backend == "sql" and not self.database_url:
            raise ValueError("DATABASE_URL is required for the sql store backend")

    @classmethod
    def from_environment(cls) -> RadarConfig:
        """Create config from environment variables with defaults."""
        timeout = _get_float_env("RADAR_STORE_TIMEOUT_SECONDS", 10.0)
        return cls(
            store_timeout_seconds=timeout if timeout > 0 else 10.0,
            store_backend=_get_choice_env(
                "RADAR_STORE_BACKEND", STORE_BACKENDS, "memory"
            ),
            environment=os.environ.get("ENVIRONMENT", "development"),
            database_url=os.environ.get("DATABASE_URL") or None,
            identity_tokens=_parse_tokens(os.environ.get("RADAR_IDENTITY_TOKENS", "")),
        )


DEFAULT_RADAR_CONFIG = RadarConfig()

# Short timeout for tests
TEST_RADAR_CONFIG = RadarConfig(store_timeout_seconds=1.0)
