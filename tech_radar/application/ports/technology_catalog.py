"""Technology catalog port.

Supplies the technology list snapshotted into an event when it is first
opened. Stands in for the initiative administration the radar depends on.
"""

from __future__ import annotations

from typing import Protocol

from tech_radar.domain.models.technology import Technology


class TechnologyCatalogProtocol(Protocol):
    """Protocol for reading an initiative's technologies."""

    async def list_technologies(
        self, initiative_name: str | None = None
    ) -> list[Technology]:
        """Technologies of an initiative, or of the default catalog.

        Raises:
            InitiativeNotFoundError: If the initiative is unknown.
        """
        ...
