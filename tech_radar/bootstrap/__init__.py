"""Bootstrap wiring: configuration, logging, database and stores."""
