"""Startup and shutdown hooks for the Tech Radar API.

Usage in FastAPI (see tech_radar.api.main):
    configure_logging()
    await prepare_store()
    ...
    await shutdown_store()
"""

from dotenv import load_dotenv
from structlog import get_logger

from tech_radar.bootstrap.database import (
    close_database_engine,
    get_engine,
    get_session_factory,
)
from tech_radar.bootstrap.logging import configure_structlog
from tech_radar.bootstrap.radar import get_radar_config
from tech_radar.infrastructure.adapters.persistence import create_schema

logger = get_logger()


def load_environment() -> None:
    """Load a .env file into the environment; existing variables win."""
    load_dotenv(override=False)


def configure_logging() -> None:
    """Configure structured logging for the configured environment.

    Should be called first in the startup sequence, before any logging occurs.
    """
    environment = get_radar_config().environment
    configure_structlog(environment)

    log = get_logger().bind(component="startup_logging")
    log.info("structured_logging_configured", environment=environment)


async def prepare_store() -> None:
    """Create the SQL schema when the SQL backend is configured."""
    config = get_radar_config()
    log = logger.bind(component="startup_store", backend=config.store_backend)
    if config.store_backend != "sql":
        log.info("in_memory_store_selected")
        return
    get_session_factory(config.database_url)
    engine = get_engine()
    assert engine is not None
    await create_schema(engine)
    log.info("sql_schema_ready")


async def shutdown_store() -> None:
    await close_database_engine()
    logger.info("store_closed")
