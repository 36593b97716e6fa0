"""Gated retrieval-augmented question answering over uploaded files and web pages."""

__version__ = "0.1.0"
