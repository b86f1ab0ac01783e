"""Einstellung: synchronize configuration files with their copies."""

__version__ = "0.1.0"
