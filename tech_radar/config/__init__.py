"""Configuration for Tech Radar."""

from tech_radar.config.radar_config import (
    DEFAULT_RADAR_CONFIG,
    TEST_RADAR_CONFIG,
    RadarConfig,
)

__all__ = ["DEFAULT_RADAR_CONFIG", "TEST_RADAR_CONFIG", "RadarConfig"]
