"""Domain layer: models, errors and pure algorithms."""
