"""HTTP API for Tech Radar."""
