"""
Verse Search Engine Package.

A small, self-contained verse search and indexing engine: loads a
heterogeneous book/chapter/verse corpus, builds an in-memory index and
ranks verses for free-text queries and direct references.
"""

__version__ = "1.0.0"
