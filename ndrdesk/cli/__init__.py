"""NDRDesk command-line interface."""
