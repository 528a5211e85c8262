"""
Deduplication Module
Normalizes article links and removes repeated links from a merged feed list
"""

from typing import List, Any
from urllib.parse import urlparse, parse_qsl, urlencode, urlunparse
from loguru import logger

TRACKING_PARAMS = {
    'utm_source', 'utm_medium', 'utm_campaign', 'utm_term', 'utm_content',
    'ref', 'fbclid', 'gclid', 'msclkid'
}


def canonicalize_url(url: str) -> str:
    """
    Canonicalize URL by removing tracking parameters and normalizing

    - scheme and host are lowercased
    - tracking parameters are dropped, the remaining query keeps its order
    - the fragment is removed

    Args:
        url: Original URL

    Returns:
        Canonicalized URL string
    """
    if not url:
        return ""

    url = url.strip()
    try:
        parsed = urlparse(url)
    except ValueError as e:
        logger.warning(f"Failed to canonicalize URL '{url}': {e}")
        return url

    if not parsed.scheme or not parsed.netloc:
        return url

    clean_params = [
        (k, v) for k, v in parse_qsl(parsed.query, keep_blank_values=True)
        if k.lower() not in TRACKING_PARAMS
    ]

    return urlunparse((
        parsed.scheme.lower(),
        parsed.netloc.lower(),
        parsed.path,
        parsed.params,
        urlencode(clean_params),
        ''
    ))


def deduplicate_articles(articles: List[Any]) -> List[Any]:
    """
    Remove articles whose canonical link was already seen

    The first occurrence wins; later copies are dropped.

    Args:
        articles: Merged article list (links already canonical)

    Returns:
        Deduplicated list of articles, input order preserved
    """
    seen_urls = set()
    unique_articles = []

    for article in articles:
        link = canonicalize_url(article.link)
        if link in seen_urls:
            logger.debug(f"URL duplicate dropped: {article.title} ({link})")
            continue
        seen_urls.add(link)
        unique_articles.append(article)

    logger.info(
        f"Deduplication: {len(articles)} articles -> {len(unique_articles)} unique articles"
    )

    return unique_articles
