"""NDRDesk: non-delivery-report resolution for courier shipments."""

__version__ = "0.1.0"
