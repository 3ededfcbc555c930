"""Topological simulation core for PLC schematics."""

__version__ = "0.1.0"
