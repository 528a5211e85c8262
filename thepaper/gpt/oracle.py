"""
Typed oracle client
Wraps the text transport with pacing, retry and response parsing so the
pipeline stages only ever see floats, categories, tags and summaries.
"""

import math
from typing import List, Tuple

from loguru import logger

from thepaper.errors import OracleError, ScoreParseError
from thepaper.gpt.limiter import RateLimiter
from thepaper.gpt.prompt import CATEGORIES, score_prompt, summary_prompt, tag_prompt
from thepaper.gpt.retry import RetryPolicy

MIN_SCORE = 0.0
MAX_SCORE = 10.0
DEFAULT_CATEGORY = "General"
DEFAULT_TAGS = ["tech"]
CATEGORY_PREFIX = "Category:"
TAGS_PREFIX = "Tags:"


def parse_score(text: str) -> float:
    """Parse a bare numeric score and clamp it into [0, 10]"""
    cleaned = (text or "").strip()
    try:
        score = float(cleaned)
    except ValueError:
        raise ScoreParseError(cleaned)
    if math.isnan(score) or math.isinf(score):
        raise ScoreParseError(cleaned)
    return max(MIN_SCORE, min(MAX_SCORE, score))


def parse_tags(text: str) -> Tuple[str, List[str]]:
    """
    Read the `Category:` and `Tags:` lines of a tagging response

    Unrecognised lines are ignored and repeated `Tags:` lines accumulate.
    A missing category falls back to "General" and an empty tag list to
    ["tech"].
    """
    category = ""
    tags = []

    for line in (text or "").splitlines():
        line = line.strip()
        if line.startswith(CATEGORY_PREFIX):
            category = line[len(CATEGORY_PREFIX):].strip().strip("[]").strip()
        elif line.startswith(TAGS_PREFIX):
            tag_str = line[len(TAGS_PREFIX):].strip().strip("[]")
            tags.extend(tag.strip() for tag in tag_str.split(",") if tag.strip())

    return category or DEFAULT_CATEGORY, tags or list(DEFAULT_TAGS)


class Oracle:
    """
    One logical client for scoring, tagging and summarizing

    Every outbound request first waits on the shared RateLimiter, and each
    call kind goes through the same RetryPolicy.

    Args:
        provider: transport with a ``request(prompt) -> str`` method
        limiter: RateLimiter owned by this oracle
        retry: RetryPolicy shared by the three call kinds
    """

    def __init__(self, provider, limiter: RateLimiter, retry: RetryPolicy):
        self.provider = provider
        self.limiter = limiter
        self.retry = retry

    def _request(self, prompt: str) -> str:
        self.limiter.wait()
        return self.provider.request(prompt)

    def _call(self, prompt: str, parse):
        def attempt():
            return parse(self._request(prompt))
        try:
            return self.retry.call(attempt)
        except OracleError:
            raise
        except Exception as e:
            raise OracleError(f"oracle call failed: {e}") from e

    def score(self, article) -> float:
        prompt = score_prompt.format(title=article.title, description=article.description)
        return self._call(prompt, parse_score)

    def categorize(self, article) -> Tuple[str, List[str]]:
        prompt = tag_prompt.format(categories=", ".join(CATEGORIES),
                                   title=article.title,
                                   description=article.description)
        return self._call(prompt, parse_tags)

    def summarize(self, article) -> str:
        prompt = summary_prompt.format(title=article.title, content=article.content)
        summary = self._call(prompt, lambda text: (text or "").strip())
        logger.debug(f"Summary for '{article.title}': {summary}")
        return summary
