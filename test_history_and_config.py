"""
JSON send-history store and environment settings tests
"""

from datetime import timedelta

import pytest

from conftest import NOW, make_article
from thepaper.__main__ import main
from thepaper.config import Settings
from thepaper.errors import ConfigError, HistoryStoreError
from thepaper.gpt.request import AIProvider
from thepaper.history import JsonHistoryStore
from thepaper.mainflow import DigestResult, RunMetrics


def digest(*titles):
    articles = [make_article(t, score=8, category="Backend") for t in titles]
    for position, article in enumerate(articles, 1):
        article.position = position
        article.summary = f"{article.title} summary."
    return DigestResult(articles, RunMetrics())


def test_recorded_links_are_recent_within_window(tmp_path):
    store = JsonHistoryStore(tmp_path / "data" / "history.json")
    store.record(digest("Alpha", "Bravo"), sent_at=NOW - timedelta(days=2))
    store.record(digest("Charlie"), sent_at=NOW - timedelta(days=40))

    links = store.recent_links(30, now=NOW)

    assert links == {"https://example.com/alpha", "https://example.com/bravo"}


def test_missing_history_file_is_empty(tmp_path):
    assert JsonHistoryStore(tmp_path / "none.json").recent_links(30) == set()


def test_malformed_history_file_raises(tmp_path):
    path = tmp_path / "history.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(HistoryStoreError):
        JsonHistoryStore(path).recent_links(30)


def test_settings_from_env(monkeypatch):
    monkeypatch.delenv("MAX_PER_CATEGORY", raising=False)
    monkeypatch.setenv("MAX_ARTICLE_NUMS", "5")
    monkeypatch.setenv("GPT_RATE_LIMIT_MS", "1500")
    monkeypatch.setenv("RECENCY_HOURS", "36")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings.build_from_envs()

    assert settings.top_n == 5
    assert settings.rate_limit_seconds == 1.5
    assert settings.recency_hours == 36.0
    assert settings.max_per_category == 2
    assert settings.log_level == "DEBUG"


def test_settings_reject_invalid_numbers(monkeypatch):
    monkeypatch.setenv("GPT_RATE_LIMIT_MS", "fast")

    with pytest.raises(ConfigError):
        Settings.build_from_envs()


def test_settings_reject_zero_top_n():
    with pytest.raises(ConfigError):
        Settings(top_n=0)


@pytest.mark.parametrize("top", ["0", "-2"])
def test_cli_rejects_non_positive_top(monkeypatch, top):
    runs = []
    monkeypatch.setattr("thepaper.__main__.execute", lambda **kwargs: runs.append(kwargs))

    assert main(["--top", top]) == 1
    assert runs == []


def test_cli_top_overrides_settings(monkeypatch):
    runs = []
    monkeypatch.setattr("thepaper.__main__.execute", lambda **kwargs: runs.append(kwargs))

    assert main(["--dry-run", "--top", "3"]) == 0
    assert runs[0]["settings"].top_n == 3
    assert runs[0]["dry_run"] is True


def test_provider_reads_base_url_from_env(monkeypatch):
    monkeypatch.setenv("AI_PROVIDER", "openai")
    monkeypatch.setenv("GPT_API_KEY", "sk-test")
    monkeypatch.setenv("GPT_BASE_URL", "https://llm.example/v1")
    monkeypatch.delenv("GPT_MODEL_NAME", raising=False)

    provider = AIProvider.build_from_envs()

    assert provider.model == "gpt-4o-mini"
    assert str(provider.client.base_url).startswith("https://llm.example/v1")
