"""
Article Scoring Module
Asks the oracle for a 0-10 relevance score per article
"""

from typing import List
from loguru import logger

from thepaper.errors import OracleError


def sort_by_score(articles: List) -> List:
    """Score descending; equal scores keep their fetch order"""
    return sorted(articles, key=lambda a: (-a.score, a.order))


def score_articles(articles: List, oracle) -> List:
    """
    Score every article sequentially

    A failed call or an unparsable answer scores the article 0 and the
    loop continues with the next one.

    Args:
        articles: Candidate articles
        oracle: Oracle used for the score calls

    Returns:
        The same articles with `score` set, sorted by score DESC
    """
    logger.info(f"Scoring {len(articles)} articles...")
    for article in articles:
        try:
            article.score = oracle.score(article)
            logger.info(f"  {article.score:.1f} - {article.title} (from {article.source})")
        except OracleError as e:
            logger.error(f"  ✗ Error scoring '{article.title}' from {article.source}: {e}")
            article.score = 0.0

    return sort_by_score(articles)
