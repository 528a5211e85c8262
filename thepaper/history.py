"""
Send history backed by a JSON file

Provides the membership data for the history filter (`recent_links`) and
records each digest's selected articles with the run metadata (`record`).
Any object with a `recent_links(days) -> set` method can stand in for it.
"""

import json
import os
from datetime import datetime, timedelta, timezone

from loguru import logger

from thepaper.errors import HistoryStoreError


class JsonHistoryStore:

    def __init__(self, path):
        self.path = str(path)

    def _load(self):
        if not os.path.exists(self.path):
            return {"digests": []}
        try:
            with open(self.path, "r", encoding="utf-8") as fp:
                data = json.load(fp)
        except (OSError, ValueError) as e:
            raise HistoryStoreError(f"Failed to read history {self.path}: {e}") from e
        if not isinstance(data, dict) or not isinstance(data.get("digests"), list):
            raise HistoryStoreError(f"Malformed history file {self.path}")
        return data

    def recent_links(self, days, now=None):
        """Links of articles sent within the last `days` days"""
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(days=days)

        links = set()
        for digest in self._load()["digests"]:
            try:
                sent_at = datetime.fromisoformat(digest["sent_at"])
            except (KeyError, TypeError, ValueError):
                logger.warning(f"Ignoring history entry without a valid sent_at: {digest.get('subject')}")
                continue
            if sent_at.tzinfo is None:
                sent_at = sent_at.replace(tzinfo=timezone.utc)
            if sent_at > cutoff:
                links.update(a["link"] for a in digest.get("articles", []) if a.get("link"))
        return links

    def record(self, result, sent_at=None):
        """Append one digest (selected articles + counters) to the history file"""
        sent_at = sent_at or datetime.now(timezone.utc)
        data = self._load()
        data["digests"].append({
            "subject": result.subject,
            "sent_at": sent_at.isoformat(),
            "metrics": result.metrics.to_dict(),
            "articles": [article.to_dict() for article in result.articles],
        })

        directory = os.path.dirname(self.path)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as fp:
                json.dump(data, fp, indent=2, ensure_ascii=False)
        except OSError as e:
            raise HistoryStoreError(f"Failed to write history {self.path}: {e}") from e

        logger.info(f"✓ Saved {len(result.articles)} articles to {self.path}")
