"""
Diversity Selection Module
Greedy top-N selection with a per-category cap and duplicate-topic rejection
"""

from typing import List, Any
from collections import defaultdict
from loguru import logger

MAX_PER_CATEGORY = 2
TOPIC_OVERLAP_THRESHOLD = 0.4

INSIGNIFICANT_WORDS = {
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to",
    "for", "of", "with", "by", "from", "is", "are", "was", "were", "be",
    "how", "why", "what", "when", "where",
}


def significant_words(title: str) -> List[str]:
    """Lowercased whitespace tokens longer than 2 chars that are not stop words"""
    return [
        word for word in (title or "").lower().split()
        if len(word) > 2 and word not in INSIGNIFICANT_WORDS
    ]


def _words_match(word: str, other: str) -> bool:
    return word == other or word.startswith(other) or other.startswith(word)


def is_duplicate_topic(title: str, selected_titles: List[str], threshold: float = TOPIC_OVERLAP_THRESHOLD) -> bool:
    """
    Check if a title covers the same topic as an already selected title

    For each selected title, count the candidate's significant words that
    equal, prefix, or are prefixed by one of the selected title's significant
    words. The ratio is taken over the candidate's significant words only.

    Returns:
        True if the ratio exceeds `threshold` for any selected title
    """
    title_words = significant_words(title)
    if not title_words:
        return False

    for selected_title in selected_titles:
        selected_words = significant_words(selected_title)

        common_words = 0
        for word in title_words:
            if any(_words_match(word, selected_word) for selected_word in selected_words):
                common_words += 1

        if common_words / len(title_words) > threshold:
            return True

    return False


def select_with_diversity(
    candidates: List[Any],
    top_n: int,
    max_per_category: int = MAX_PER_CATEGORY
) -> List[Any]:
    """
    Select up to top_n articles in a single greedy pass

    Candidates must already be sorted by score DESC. An article is skipped
    when its category is full or its title repeats a selected topic. There
    is no second pass: the result may hold fewer than top_n articles.

    Returns:
        Selected articles with 1-based `position` set
    """
    selected = []
    category_count = defaultdict(int)
    selected_titles = []

    for article in candidates:
        if len(selected) >= top_n:
            break

        if category_count[article.category] >= max_per_category:
            logger.info(
                f"  ⊘ Skipping '{article.title}' - category '{article.category}' limit reached "
                f"({category_count[article.category]}/{max_per_category})"
            )
            continue

        if is_duplicate_topic(article.title, selected_titles):
            logger.info(f"  ⊘ Skipping '{article.title}' - similar topic already selected")
            continue

        selected.append(article)
        category_count[article.category] += 1
        selected_titles.append(article.title)

    for position, article in enumerate(selected, 1):
        article.position = position

    logger.info(f"Selected {len(selected)} articles with category diversity:")
    for article in selected:
        logger.info(f"  {article.position}. [{article.score:.1f}] {article.title} (Category: {article.category})")

    return selected
