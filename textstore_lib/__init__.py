"""Versioned, optimistic-concurrency text storage over blob backends."""

__version__ = "0.1.0"
