"""
Selection tests: scoring order, tag subset, diversity cap and topic duplicates
"""

from conftest import FakeProvider, make_article
from thepaper.gpt.limiter import RateLimiter
from thepaper.gpt.oracle import Oracle
from thepaper.gpt.retry import RetryPolicy
from thepaper.gpt.summary import FALLBACK_SUMMARY, summarize_articles
from thepaper.selection import (is_duplicate_topic, score_articles, select_with_diversity,
                                tag_top_candidates)


def build(provider, clock):
    return Oracle(provider,
                  RateLimiter(0, clock=clock, sleep=clock.sleep),
                  RetryPolicy(max_retries=1, sleep=clock.sleep))


def test_topic_duplicate_detection():
    assert is_duplicate_topic("Rust 1.75 Release Notes", ["Rust 1.75 Released"])
    assert is_duplicate_topic("Rust 1.75 Released", ["Rust 1.75 Release Notes"])
    assert not is_duplicate_topic("Python 3.13 Released", ["Rust 1.75 Released"])
    assert not is_duplicate_topic("Rust 1.75 Released", ["Python 3.13 Released"])


def test_topic_duplicate_ignores_stop_words_and_short_tokens():
    # "how" is a stop word and "to" is too short; kubernetes matches 1 of 2
    assert is_duplicate_topic("How to use Kubernetes", ["Kubernetes at scale"])
    assert not is_duplicate_topic("How to do it", ["How to do it"])


def test_topic_duplicate_ratio_uses_candidate_words_only():
    # 1 of 2 candidate words match (0.5); the reverse is 1 of 4 (0.25)
    assert is_duplicate_topic("Postgres tuning", ["Postgres vacuum internals explained"])
    assert not is_duplicate_topic("Postgres vacuum internals explained", ["Postgres tuning"])


def test_category_cap_stops_without_relaxing():
    candidates = [
        make_article(title, score=score, category="A", order=i)
        for i, (title, score) in enumerate(
            [("Alpha", 9), ("Bravo", 8), ("Charlie", 7), ("Delta", 6), ("Echo", 5)])
    ]

    selected = select_with_diversity(candidates, top_n=4, max_per_category=2)

    assert [a.title for a in selected] == ["Alpha", "Bravo"]
    assert all(a.category == "A" for a in selected)
    assert [a.position for a in selected] == [1, 2]


def test_selection_skips_duplicate_topics_and_respects_n():
    candidates = [
        make_article("Rust 1.75 Released", score=9, category="Open Source", order=0),
        make_article("Rust 1.75 Release Notes", score=8.5, category="Backend", order=1),
        make_article("Python 3.13 Released", score=8, category="Backend", order=2),
        make_article("Terraform drift detection", score=7, category="DevOps", order=3),
        make_article("Kafka consumer lag", score=6, category="Data", order=4),
    ]

    selected = select_with_diversity(candidates, top_n=3)

    assert [a.title for a in selected] == [
        "Rust 1.75 Released", "Python 3.13 Released", "Terraform drift detection"]


def test_scores_sorted_descending_with_stable_ties(clock):
    articles = [make_article(t, order=i) for i, t in enumerate(["Alpha", "Bravo", "Charlie", "Delta"])]
    provider = FakeProvider(scores={"Alpha": "7", "Bravo": "9", "Charlie": "7", "Delta": "oops"})

    scored = score_articles(articles, build(provider, clock))

    assert [a.title for a in scored] == ["Bravo", "Alpha", "Charlie", "Delta"]
    assert [a.score for a in scored] == [9.0, 7.0, 7.0, 0.0]


def test_scoring_failure_after_retries_scores_zero(clock):
    articles = [make_article("Alpha"), make_article("Bravo", order=1)]
    provider = FakeProvider(scores={"Bravo": "4"}, fail_first=2)

    scored = score_articles(articles, build(provider, clock))

    assert [(a.title, a.score) for a in scored] == [("Bravo", 4.0), ("Alpha", 0.0)]


def test_tagging_limited_to_three_times_n(clock):
    scored = [make_article(f"Item{i}", score=10 - i * 0.5, order=i) for i in range(10)]
    provider = FakeProvider(categories={"Item0": "Security"})

    candidates = tag_top_candidates(scored, build(provider, clock), top_n=2)

    assert len(candidates) == 6
    assert len(provider.prompts) == 6
    assert candidates[0].category == "Security"
    assert candidates[1].category == "General"
    assert all(a.category is None for a in scored[6:])


def test_tagging_failure_uses_defaults(clock):
    scored = [make_article("Alpha", score=5)]
    provider = FakeProvider(fail_first=10)

    candidates = tag_top_candidates(scored, build(provider, clock), top_n=8)

    assert candidates[0].category == "General"
    assert candidates[0].tags == ["tech"]


def test_summary_fallback_on_failure(clock):
    selected = [make_article("Alpha"), make_article("Bravo")]
    provider = FakeProvider(summaries={"Bravo": "Bravo explained."}, fail_first=2)

    summarize_articles(selected, build(provider, clock))

    assert selected[0].summary == FALLBACK_SUMMARY
    assert selected[1].summary == "Bravo explained."
