"""Protective put position sizing."""

__version__ = "1.0.0"
