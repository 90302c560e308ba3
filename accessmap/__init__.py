"""Accessibility place mapping service built on OpenStreetMap data."""

__version__ = "1.0.0"
