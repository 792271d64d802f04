"""Collectible-figure ownership tracking and sharing service."""

__version__ = "0.1.0"
