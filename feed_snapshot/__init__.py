"""Fetch a syndication feed and save a normalized snapshot of it."""

__version__ = "1.0.0"
