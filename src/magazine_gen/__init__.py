"""Swipeable single-file HTML magazine generator."""

__version__ = "0.1.0"
