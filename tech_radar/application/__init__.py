"""Application layer: ports and services."""
