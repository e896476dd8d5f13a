"""Scoring, classification and signature core for performance reviews."""

__version__ = "0.1.0"
