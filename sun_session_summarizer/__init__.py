"""Heuristic session summarizer exposed as tools over stdio."""

__version__ = "1.0.0"
