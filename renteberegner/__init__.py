"""Compound-interest calculator service."""

__version__ = "0.1.0"
