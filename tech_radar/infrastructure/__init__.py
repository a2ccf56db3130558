"""Infrastructure adapters: stores, stubs and observability."""
