"""Podcast discovery and AI episode summarization service."""

__version__ = "0.1.0"
