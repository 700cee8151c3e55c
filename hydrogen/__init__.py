"""Asyncio Lavalink client and formatting helpers for music bots."""

__version__ = "0.0.1a14"
__all__ = ["__version__"]