import calendar
import json
import os
from datetime import datetime, timezone
from typing import List, Optional

import html2text
from dateutil import parser as dtparser
from loguru import logger

from thepaper.selection.dedup import canonicalize_url

DEFAULT_CATEGORY = "General Tech News"


class Article:
    """A feed entry travelling through the pipeline.

    Fetching fills the candidate fields; scoring, tagging, selection and
    summarizing each add their own attributes on the same object.
    """
    title: str
    description: str
    content: str
    link: str
    source: str
    published: Optional[datetime]
    # position in the merged fetch output, used as the stable tie-break
    order: int
    score: float = 0.0
    category: str = None
    tags: List[str] = None
    summary: str = None
    position: int = None

    def __init__(self, title="", description="", content=None, link="", source="",
                 published=None, order=0, **kwargs):
        self.title = title
        self.description = description
        self.content = content if content else description
        self.link = link
        self.source = source
        self.published = published
        self.order = order
        self.score = 0.0
        self.category = None
        self.tags = None
        self.summary = None
        self.position = None
        for key, value in kwargs.items():
            setattr(self, key, value)

    def __repr__(self):
        return f"Article(title={self.title!r}, link={self.link!r}, score={self.score})"

    def to_dict(self):
        return {
            "title": self.title,
            "link": self.link,
            "source": self.source,
            "published": self.published.isoformat() if self.published else None,
            "score": self.score,
            "category": self.category,
            "tags": self.tags,
            "summary": self.summary,
            "position": self.position,
        }


class FeedSource:
    """One entry of the source registry"""

    def __init__(self, name, url, category=DEFAULT_CATEGORY, active=True):
        self.name = name
        self.url = url
        self.category = category
        self.active = active

    def __repr__(self):
        return f"FeedSource(name={self.name!r}, url={self.url!r})"


def load_rss_configs(resource) -> List[FeedSource]:
    """
    Load the source registry from a JSON file or a directory of JSON files

    Format:
        {"categories": [{"category": "...", "items": [{"title", "url", "active"}]}]}
    """
    sources = []

    def load_config_with(path):
        with open(path, "r", encoding="utf-8") as fp:
            data = json.loads(fp.read())
        for rss_category in data.get("categories", []):
            category = rss_category.get("category", DEFAULT_CATEGORY)
            for item in rss_category.get("items", []):
                if not item.get("url"):
                    logger.warning(f"Skipping source without url in {path}: {item}")
                    continue
                sources.append(FeedSource(
                    name=item.get("title") or item["url"],
                    url=item["url"],
                    category=category,
                    active=item.get("active", True),
                ))

    resource = str(resource)
    if os.path.isdir(resource):
        for file in sorted(os.listdir(resource)):
            if file.endswith("json"):
                load_config_with(os.path.join(resource, file))
    else:
        load_config_with(resource)

    logger.info(f"Loaded {len(sources)} sources from {resource}")
    return sources


def active_sources(sources: List[FeedSource]) -> List[FeedSource]:
    return [source for source in sources if source.active]


def source_categories(sources: List[FeedSource]) -> List[str]:
    """Distinct categories in registry order"""
    categories = []
    for source in sources:
        if source.category not in categories:
            categories.append(source.category)
    return categories


def _extract_link_from_item(rss_item):
    """
    Feed entries occasionally omit the top-level ``link`` field.
    Fall back to id/guid, returning None when no link exists.
    """
    if not rss_item:
        return None

    link = rss_item.get("link")
    if link:
        return link

    for key in ("id", "guid"):
        candidate = rss_item.get(key)
        if candidate and str(candidate).startswith(("http://", "https://")):
            return candidate

    return None


def _entry_content(rss_item):
    contents = rss_item.get("content") or []
    for content in contents:
        value = content.get("value") if hasattr(content, "get") else None
        if value:
            return value
    return ""


def entry_published(rss_item) -> Optional[datetime]:
    """Publication time of a feed entry as an aware UTC datetime, or None"""
    for key in ("published_parsed", "updated_parsed"):
        parsed = rss_item.get(key)
        if parsed:
            return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)

    for key in ("published", "updated"):
        date_string = rss_item.get(key)
        if date_string:
            published = unify_timezone(date_string)
            if published:
                return published
    return None


def unify_timezone(date_string) -> Optional[datetime]:
    try:
        parsed = dtparser.parse(date_string)
    except (ValueError, OverflowError) as e:
        logger.debug(f"Unparseable date {date_string!r}: {e}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def transform_html2txt(content):
    if not content:
        return ""
    html_transform = html2text.HTML2Text(bodywidth=0)
    html_transform.ignore_links = True
    html_transform.ignore_images = True
    html_transform.ignore_tables = True
    html_transform.ignore_emphasis = True
    return html_transform.handle(content).strip()


def gen_article_from(rss_item, source_name):
    title = (rss_item.get("title") or "").strip()

    link = _extract_link_from_item(rss_item)
    if not link:
        logger.warning(f"Skipping article without link from {source_name}: {title}")
        return None

    description = transform_html2txt(rss_item.get("summary") or rss_item.get("description") or "")
    content = transform_html2txt(_entry_content(rss_item))

    return Article(title=title,
                   description=description,
                   content=content,
                   link=canonicalize_url(link),
                   source=source_name,
                   published=entry_published(rss_item))
