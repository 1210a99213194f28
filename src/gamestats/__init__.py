"""gamestats: markdown content pipeline for game statistics."""

__version__ = "0.1.0"
