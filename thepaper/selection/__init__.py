"""
Selection Module
Provides article scoring, tagging, deduplication and diversity selection
"""

from .scorer import score_articles, sort_by_score
from .tagger import tag_top_candidates
from .diversity import select_with_diversity, is_duplicate_topic
from .dedup import canonicalize_url, deduplicate_articles

__all__ = [
    'score_articles',
    'sort_by_score',
    'tag_top_candidates',
    'select_with_diversity',
    'is_duplicate_topic',
    'canonicalize_url',
    'deduplicate_articles'
]
