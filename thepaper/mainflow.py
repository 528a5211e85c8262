from collections import Counter
from datetime import datetime

from loguru import logger

import thepaper.article.rss as rss
from thepaper.article.fetcher import fetch_all
from thepaper.article.filters import exclude_sent, filter_recent
from thepaper.config import Settings
from thepaper.gpt.limiter import RateLimiter
from thepaper.gpt.oracle import Oracle
from thepaper.gpt.request import AIProvider
from thepaper.gpt.retry import RetryPolicy
from thepaper.gpt.summary import summarize_articles
from thepaper.history import JsonHistoryStore
from thepaper.selection import score_articles, select_with_diversity, tag_top_candidates


class RunMetrics:
    """Counters collected while the pipeline runs"""

    def __init__(self):
        self.sources = 0
        self.failed_sources = 0
        self.raw_fetched = 0
        self.fetched = 0
        self.after_recency = 0
        self.after_history = 0
        self.unique_sources = 0
        self.scored = 0
        self.tagged = 0
        self.selected = 0
        self.stopped_at = None

    def to_dict(self):
        return dict(self.__dict__)


class DigestResult:
    """Final ordered selection plus the run counters"""

    def __init__(self, articles, metrics, created_at=None):
        self.articles = articles
        self.metrics = metrics
        self.created_at = created_at or datetime.now()

    @property
    def is_empty(self):
        return not self.articles

    @property
    def subject(self):
        return f"The Paper - {self.created_at:%B} {self.created_at.day}, {self.created_at:%Y}"


def build_oracle(settings: Settings, provider=None) -> Oracle:
    provider = provider or AIProvider.build_from_envs()
    limiter = RateLimiter(settings.rate_limit_seconds)
    retry = RetryPolicy(max_retries=settings.max_retries, base_delay=settings.base_delay)
    return Oracle(provider, limiter, retry)


def _stop(metrics, stage, message):
    logger.info(message)
    metrics.stopped_at = stage
    return DigestResult([], metrics)


def run_pipeline(sources, oracle, history, settings: Settings, fetch=fetch_all, now=None) -> DigestResult:
    """
    Fetch, filter, score, tag, select and summarize in strict sequence

    An empty result is a normal outcome ("nothing to send"); only a fetch
    stage where every source failed raises (AllFeedsFailedError).
    """
    metrics = RunMetrics()
    metrics.sources = len(sources)

    logger.info(f"Fetching articles from {len(sources)} feeds across {len(rss.source_categories(sources))} categories...")
    fetched = fetch(sources)
    metrics.failed_sources = fetched.failed_count
    metrics.raw_fetched = fetched.raw_count
    metrics.fetched = len(fetched.articles)
    articles = fetched.articles
    if not articles:
        return _stop(metrics, "fetch", "No articles found")

    articles = filter_recent(articles, settings.recency_hours, now=now)
    metrics.after_recency = len(articles)
    if not articles:
        return _stop(metrics, "recency", "No recent articles found")

    articles = exclude_sent(articles, history, settings.history_days)
    metrics.after_history = len(articles)
    if not articles:
        return _stop(metrics, "history", "No new articles found (all were sent recently)")

    source_count = Counter(article.source for article in articles)
    metrics.unique_sources = len(source_count)
    logger.info("Article distribution by source:")
    for source, count in source_count.most_common():
        logger.info(f"  {source}: {count} articles")

    scored = score_articles(articles, oracle)
    metrics.scored = len(scored)

    candidates = tag_top_candidates(scored, oracle, settings.top_n, settings.candidate_multiplier)
    metrics.tagged = len(candidates)

    selected = select_with_diversity(candidates, settings.top_n, settings.max_per_category)
    metrics.selected = len(selected)
    if not selected:
        return _stop(metrics, "selection", "No articles survived selection")

    summarize_articles(selected, oracle)
    logger.info(f"Selected and summarized {len(selected)} top articles")
    return DigestResult(selected, metrics)


def log_digest(result: DigestResult, dry_run: bool = False):
    metrics = result.metrics
    logger.info("=" * 60)
    logger.info("🔍 DRY RUN SUMMARY" if dry_run else "📰 DIGEST SUMMARY")
    logger.info("=" * 60)
    logger.info(f"📊 Total articles fetched: {metrics.fetched} ({metrics.raw_fetched} before dedup)")
    logger.info(f"📰 Unique sources: {metrics.unique_sources}")
    logger.info(f"🕒 After recency filter: {metrics.after_recency}")
    logger.info(f"🗂 After history filter: {metrics.after_history}")
    logger.info(f"⭐ Top articles selected: {metrics.selected}")
    for article in result.articles:
        logger.info(f"  {article.position}. [{article.score:.1f}] {article.title}")
        logger.info(f"     Source: {article.source} | Category: {article.category} | Tags: {', '.join(article.tags or [])}")
        logger.info(f"     {article.summary}")
    logger.info("=" * 60)


def execute(dry_run=False, settings: Settings = None, provider=None, history=None, deliver=None) -> DigestResult:
    """
    Run one digest end to end with the configured collaborators

    `deliver` receives the DigestResult; it is skipped in dry-run (preview)
    mode, everything before it runs identically.
    """
    settings = settings or Settings.build_from_envs()
    if dry_run:
        logger.info("🔍 DRY RUN MODE - No emails will be sent")

    sources = rss.active_sources(rss.load_rss_configs(settings.rss_resource))
    history = history or JsonHistoryStore(settings.history_file)
    oracle = build_oracle(settings, provider)

    result = run_pipeline(sources, oracle, history, settings)
    if result.is_empty:
        logger.info(f"Nothing to send (stopped at: {result.metrics.stopped_at})")
        return result

    history.record(result)
    log_digest(result, dry_run=dry_run)

    if dry_run:
        logger.info("✅ Dry run complete - no emails sent")
    elif deliver is None:
        logger.warning("No delivery collaborator configured; digest was not sent")
    else:
        deliver(result)
        logger.info(f"✅ Digest delivered: {result.subject}")
    return result
