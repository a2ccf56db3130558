"""
API routes for Tech Radar.

This module contains all FastAPI router definitions.
Routes are organized by domain concern.

Available routers:
- health: Health check endpoints
- voting_events: Voting event lifecycle, technologies, recommendations
- votes: Ballots, tallies, vote comments
"""

from tech_radar.api.routes.health import router as health_router
from tech_radar.api.routes.votes import router as votes_router
from tech_radar.api.routes.voting_events import router as voting_events_router

__all__: list[str] = ["health_router", "votes_router", "voting_events_router"]
