"""
Shared fakes for the pipeline tests: RSS documents, oracle transport, clock
"""

import re
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

import pytest

from thepaper.article.rss import Article
from thepaper.errors import OracleOverloadedError

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def rss_xml(channel_title, items):
    """items: dicts with title, link and optional published / description"""
    entries = []
    for item in items:
        pub = ""
        if item.get("published"):
            pub = f"<pubDate>{format_datetime(item['published'])}</pubDate>"
        entries.append(
            "<item>"
            f"<title>{item['title']}</title>"
            f"<link>{item['link']}</link>"
            f"<description>{item.get('description', 'About ' + item['title'])}</description>"
            f"{pub}"
            "</item>"
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel>'
        f"<title>{channel_title}</title><link>https://example.com</link><description>feed</description>"
        + "".join(entries)
        + "</channel></rss>"
    ).encode("utf-8")


def hours_ago(hours, now=NOW):
    return now - timedelta(hours=hours)


def make_article(title, score=0.0, category=None, order=0, link=None, **kwargs):
    article = Article(title=title,
                      description=f"About {title}",
                      link=link or f"https://example.com/{title.lower().replace(' ', '-')}",
                      source="Example",
                      order=order,
                      **kwargs)
    article.score = score
    article.category = category
    return article


class FakeClock:
    """Monotonic clock whose sleep advances time instead of blocking"""

    def __init__(self, start=1000.0):
        self.now = start
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


TITLE_RE = re.compile(r"^Title: (.*)$", re.MULTILINE)


class FakeProvider:
    """
    Answers oracle prompts from lookup tables keyed by article title

    `fail_first` makes the first N requests raise the overloaded signal.
    """

    def __init__(self, scores=None, categories=None, summaries=None, fail_first=0, default_score="5"):
        self.scores = scores or {}
        self.categories = categories or {}
        self.summaries = summaries or {}
        self.fail_first = fail_first
        self.default_score = default_score
        self.prompts = []

    def request(self, prompt, content=""):
        self.prompts.append(prompt)
        if len(self.prompts) <= self.fail_first:
            raise OracleOverloadedError("429 RESOURCE_EXHAUSTED")

        match = TITLE_RE.search(prompt)
        title = match.group(1).strip() if match else ""
        if prompt.startswith("Rate"):
            return str(self.scores.get(title, self.default_score))
        if prompt.startswith("Analyze"):
            category = self.categories.get(title, "General")
            return f"Category: {category}\nTags: [{title.lower()}, news]"
        if prompt.startswith("Summarize"):
            return self.summaries.get(title, f"{title} in one sentence.")
        return ""


@pytest.fixture
def clock():
    return FakeClock()
