"""Supervise ffmpeg subtitle burn-in encode jobs."""

__version__ = "0.1.0"
