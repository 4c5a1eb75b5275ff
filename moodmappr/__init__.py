"""Mood-O-Mappr: linked views over a music & mental health survey."""

__version__ = "0.1.0"
