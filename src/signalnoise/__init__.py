"""Plain-text content parsing and HTML rendering for the Signal & Noise site."""

__version__ = "0.1.0"
