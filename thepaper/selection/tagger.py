"""
Category and tag extraction for the best-scoring candidates
"""

from typing import List
from loguru import logger

from thepaper.errors import OracleError
from thepaper.gpt.oracle import DEFAULT_CATEGORY, DEFAULT_TAGS


def tag_top_candidates(scored: List, oracle, top_n: int, multiplier: int = 3) -> List:
    """
    Annotate the best min(multiplier * top_n, len(scored)) articles

    Only this subset is returned; lower-ranked articles have no realistic
    chance of selection and are never sent to the oracle.

    Args:
        scored: Articles sorted by score DESC
        oracle: Oracle used for the categorize calls
        top_n: Number of articles the digest will hold

    Returns:
        The annotated subset, order unchanged
    """
    candidate_count = min(top_n * multiplier, len(scored))
    candidates = scored[:candidate_count]

    logger.info(f"Extracting tags and categories for top {candidate_count} candidates...")
    for article in candidates:
        try:
            article.category, article.tags = oracle.categorize(article)
            logger.info(f"  ✓ '{article.title}' → Category: {article.category}, Tags: {article.tags}")
        except OracleError as e:
            logger.error(f"  ✗ Error extracting tags for '{article.title}': {e}")
            article.category = DEFAULT_CATEGORY
            article.tags = list(DEFAULT_TAGS)

    return candidates
