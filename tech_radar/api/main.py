"""FastAPI application entry point for Tech Radar."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from tech_radar import __version__
from tech_radar.api.errors import register_error_handlers
from tech_radar.api.middleware import LoggingMiddleware, RequestTimeoutMiddleware
from tech_radar.api.routes import health_router, votes_router, voting_events_router
from tech_radar.api.startup import (
    configure_logging,
    load_environment,
    prepare_store,
    shutdown_store,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    load_environment()
    configure_logging()
    await prepare_store()
    yield
    await shutdown_store()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Tech Radar API",
        description="Voting events, ballots and radar blips",
        version=__version__,
        lifespan=lifespan,
    )
    # Last added runs first: the correlation id is set before the timeout.
    app.add_middleware(RequestTimeoutMiddleware)
    app.add_middleware(LoggingMiddleware)
    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(voting_events_router)
    app.include_router(votes_router)
    return app


app = create_app()
