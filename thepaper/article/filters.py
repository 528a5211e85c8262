"""
Candidate filters applied between fetching and scoring
"""

from datetime import datetime, timedelta, timezone
from typing import List

from loguru import logger

from thepaper.article.rss import Article


def is_article_recent(article_date: datetime, hours_limit: float = 24.0, now: datetime = None) -> bool:
    """
    Check if article is within the recent hours limit

    Args:
        article_date: Article publication datetime (naive values are read as UTC)
        hours_limit: Maximum age in hours (default: 24)
        now: Reference time, defaults to the current time

    Returns:
        True if article is within hours_limit or has no date, False otherwise
    """
    if not article_date:
        # Some feeds omit publish dates; assume recent
        return True

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    if article_date.tzinfo is None:
        article_date = article_date.replace(tzinfo=timezone.utc)

    return article_date > now - timedelta(hours=hours_limit)


def filter_recent(articles: List[Article], hours_limit: float = 24.0, now: datetime = None) -> List[Article]:
    recent = [a for a in articles if is_article_recent(a.published, hours_limit, now)]
    logger.info(f"Filtered to {len(recent)} articles from last {hours_limit:g} hours (from {len(articles)} total)")
    return recent


def exclude_sent(articles: List[Article], history, days: int = 30) -> List[Article]:
    """
    Drop articles whose link was sent within the last `days` days

    A failing history lookup degrades to no exclusion rather than aborting.
    """
    try:
        sent_links = history.recent_links(days)
    except Exception as e:
        logger.warning(f"Warning: Failed to get recent article URLs, skipping history filter: {e}")
        return list(articles)

    new_articles = [a for a in articles if a.link not in sent_links]

    filtered = len(articles) - len(new_articles)
    if filtered > 0:
        logger.info(f"Filtered out {filtered} duplicate articles sent in the last {days} days")
    return new_articles
