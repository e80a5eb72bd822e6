"""
TermSearch - a minimal in-memory full-text search engine.
"""

__version__ = "0.1.0"
