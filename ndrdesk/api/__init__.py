"""NDRDesk HTTP API."""
