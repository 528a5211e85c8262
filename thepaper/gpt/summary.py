from loguru import logger

from thepaper.errors import OracleError

FALLBACK_SUMMARY = "Summary unavailable."


def summarize_articles(selected, oracle):
    """
    Attach a one-sentence summary to each selected article, in order

    The oracle's text is kept verbatim; a failed call leaves the fallback
    summary instead of aborting the run.
    """
    if not selected:
        return []

    logger.info(f"Generating summaries for {len(selected)} articles...")
    for article in selected:
        try:
            article.summary = oracle.summarize(article) or FALLBACK_SUMMARY
            logger.info(f"  ✓ Summarized '{article.title}'")
        except OracleError as e:
            logger.error(f"  ✗ Error summarizing '{article.title}': {e}")
            article.summary = FALLBACK_SUMMARY

    return selected
