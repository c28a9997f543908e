"""Raster effects on RGBA NumPy images: colour and imaging helpers, an effect framework and sample effects."""

__version__ = "0.1.0"