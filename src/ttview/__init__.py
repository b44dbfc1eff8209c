"""Render raster images as colored half-block text in the terminal."""

__version__ = "0.1.0"
