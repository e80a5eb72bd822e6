"""
In-memory inverted index with coverage based search.
"""

from .inverted_index import InvertedIndex
from .synchronized import SynchronizedIndex
