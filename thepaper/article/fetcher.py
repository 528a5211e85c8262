"""
Concurrent feed fetching
One download task per source; results merged and deduplicated once all finish
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List

import feedparser
import requests
from loguru import logger

from thepaper.article.rss import FeedSource, gen_article_from
from thepaper.errors import AllFeedsFailedError, FeedFetchError
from thepaper.selection.dedup import deduplicate_articles

REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
}
REQUEST_TIMEOUT = 10


class FetchResult:
    """Merged output of one fetch stage"""

    def __init__(self, articles, errors, raw_count):
        self.articles = articles
        self.errors = errors
        self.raw_count = raw_count

    @property
    def failed_count(self):
        return len(self.errors)


def download_feed(url: str) -> bytes:
    try:
        response = requests.get(url, headers=REQUEST_HEADERS, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise FeedFetchError(url, e)
    return response.content


def fetch_single(source: FeedSource, download=None):
    """Download and parse one source into articles; raises FeedFetchError"""
    body = (download or download_feed)(source.url)
    feed = feedparser.parse(body)

    if feed.bozo and not feed.entries:
        raise FeedFetchError(source.url, feed.get("bozo_exception") or "unparseable feed")

    source_name = feed.feed.get("title") or source.name or source.url
    articles = []
    for entry in feed.entries:
        article = gen_article_from(entry, source_name)
        if article is not None:
            articles.append(article)

    logger.info(f"  ✓ Fetched {len(articles)} articles from {source_name}")
    return articles


def fetch_all(sources: List[FeedSource], download=None) -> FetchResult:
    """
    Fetch every source concurrently and merge the results

    Each source runs in its own worker; a failing source is logged and does
    not affect the others. Articles are merged in completion order, so the
    first-occurrence winner of a duplicate link may differ between runs.

    An empty source list is not a failure and yields an empty result.

    Raises:
        AllFeedsFailedError: when every source failed
    """
    if not sources:
        logger.warning("No active feed sources configured")
        return FetchResult(articles=[], errors=[], raw_count=0)

    merged = []
    errors = []

    # TODO: bound max_workers once the registry grows past a few dozen sources
    with ThreadPoolExecutor(max_workers=len(sources)) as executor:
        futures = {executor.submit(fetch_single, source, download): source for source in sources}
        for future in as_completed(futures):
            source = futures[future]
            try:
                merged.extend(future.result())
            except FeedFetchError as e:
                logger.error(f"  ✗ Failed to fetch {source.url}: {e.cause}")
                errors.append(e)
            except Exception as e:
                logger.exception(f"  ✗ Unexpected error fetching {source.url}: {e}")
                errors.append(FeedFetchError(source.url, e))

    succeeded = len(sources) - len(errors)
    logger.info(f"Fetch summary: {succeeded}/{len(sources)} feeds successful, {len(errors)} failed")

    if succeeded == 0:
        raise AllFeedsFailedError(errors)

    for order, article in enumerate(merged):
        article.order = order

    unique = deduplicate_articles(merged)
    return FetchResult(articles=unique, errors=errors, raw_count=len(merged))
