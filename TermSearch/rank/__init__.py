"""
Ranking of search results by match coverage and TF-IDF relevance.
"""

from .rank import Rank, RankConfig
