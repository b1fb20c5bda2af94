"""Pannable, zoomable historical map with time-indexed places and rivers."""

__version__ = "0.1.0"
