"""Scrolling marquee text for terminal status lines."""

__version__ = "0.2.0"
