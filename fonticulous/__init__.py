"""Fonticulous: OpenType Font Variations codec and tools."""

__version__ = "0.1.0"
