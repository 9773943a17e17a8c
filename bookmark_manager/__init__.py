"""Bookmark Manager - folders, tags and search for saved URLs."""

__version__ = "1.0.0"
