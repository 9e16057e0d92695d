"""Browsing core for a reconstructed Cherokee verb-root dataset."""

__version__ = "0.1.0"
