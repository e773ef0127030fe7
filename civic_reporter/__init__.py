"""Civic complaint reporting backend: classification, guidance, chat and storage."""

__version__ = "1.0.0"
