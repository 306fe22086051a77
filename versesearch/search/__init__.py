"""
Search module for ranked verse retrieval.

Provides query parsing with reference resolution, concept expansion,
multi-signal scoring and the result models.
"""

from .models import SearchQuery, ParsedQuery, Reference, RankedResult, SearchStats
from .concepts import CONCEPT_EXPANSIONS, build_concepts, expand_tokens
from .query_parser import QueryParser, is_abbreviation
from .engine import SearchEngine, search, describe_search_method

__all__ = [
    "SearchQuery",
    "ParsedQuery",
    "Reference",
    "RankedResult",
    "SearchStats",
    "CONCEPT_EXPANSIONS",
    "build_concepts",
    "expand_tokens",
    "QueryParser",
    "is_abbreviation",
    "SearchEngine",
    "search",
    "describe_search_method"
]
