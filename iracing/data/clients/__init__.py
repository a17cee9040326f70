"""High-level clients."""

from .data_client import IRacingDataClient

__all__ = ["IRacingDataClient"]
