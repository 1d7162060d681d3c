# src/version.py - v1
"""Package version, shared by the CLI and packaging metadata."""

__version__ = "0.1.0"
