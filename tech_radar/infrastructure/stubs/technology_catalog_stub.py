"""In-memory technology catalog.

Serves a fixed technology list per initiative, with a default list used
for events that name no initiative. Naming an initiative the catalog does
not hold is an error, never a silent fall back to the default list.
"""

from __future__ import annotations

from collections.abc import Iterable

from structlog import get_logger

from tech_radar.application.ports.technology_catalog import TechnologyCatalogProtocol
from tech_radar.domain.errors import InitiativeNotFoundError
from tech_radar.domain.models.technology import Technology

logger = get_logger()

DEFAULT_TECHNOLOGIES: tuple[Technology, ...] = (
    Technology(id="tech-kubernetes", name="Kubernetes", quadrant="platforms"),
    Technology(id="tech-terraform", name="Terraform", quadrant="tools"),
    Technology(id="tech-rust", name="Rust", quadrant="languages & frameworks"),
    Technology(
        id="tech-pair-programming", name="Pair programming", quadrant="techniques"
    ),
)


class TechnologyCatalogStub(TechnologyCatalogProtocol):
    """Catalog backed by a dict of initiative name to technologies."""

    def __init__(
        self,
        default: Iterable[Technology] = DEFAULT_TECHNOLOGIES,
        initiatives: dict[str, list[Technology]] | None = None,
    ) -> None:
        self._default = list(default)
        self._initiatives = dict(initiatives or {})

    async def list_technologies(
        self, initiative_name: str | None = None
    ) -> list[Technology]:
        if initiative_name is None:
            return list(self._default)
        if initiative_name not in self._initiatives:
            logger.warning(
                "initiative_not_found",
                initiative_name=initiative_name,
                known=sorted(self._initiatives),
            )
            raise InitiativeNotFoundError(initiative_name)
        return list(self._initiatives[initiative_name])

    def set_initiative(self, name: str, technologies: Iterable[Technology]) -> None:
        self._initiatives[name] = list(technologies)
