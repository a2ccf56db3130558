"""Radar ring value type.

A ring is the adoption-maturity level a voter assigns to a technology.
"""

from __future__ import annotations

from enum import Enum


class Ring(Enum):
    """Adoption ring of the technology radar.

    Rings:
        ADOPT: Proven, recommended as the default choice
        TRIAL: Worth pursuing on a project that can handle the risk
        ASSESS: Worth exploring to understand its impact
        HOLD: Proceed with caution
    """

    ADOPT = "adopt"
    TRIAL = "trial"
    ASSESS = "assess"
    HOLD = "hold"

    @classmethod
    def parse(cls, value: str | Ring) -> Ring:
        """Parse a ring from a case-insensitive string.

        Args:
            value: Ring name such as "Hold" or an existing Ring.

        Returns:
            The matching Ring.

        Raises:
            ValueError: If the value is not one of the four rings.
        """
        if isinstance(value, Ring):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            allowed = [r.value for r in cls]
            raise ValueError(
                f"Invalid ring: '{value}'. Must be one of: {allowed}"
            ) from None

