"""Ratchet - MCP server for PointCare EMR visit documentation."""

__version__ = "0.1.0"

__all__ = ["__version__"]
