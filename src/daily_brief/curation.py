"""
Selection pipeline: recency, keyword relevance, link dedup, ranked truncation.

Every stage takes a sequence and returns a new list; items are never
modified, only dropped or reordered.
"""

import logging
from datetime import datetime
from typing import Iterable, Sequence

from .config import CurationConfig
from .fetchers.rss_fetcher import CandidateItem

logger = logging.getLogger(__name__)


def is_within_age_limit(published_at: datetime, now: datetime, age_limit_hours: float) -> bool:
    age_hours = (now - published_at).total_seconds() / 3600
    return age_hours <= age_limit_hours


def filter_recent(
    items: Sequence[CandidateItem], now: datetime, age_limit_hours: float
) -> list[CandidateItem]:
    """Keep items published no more than ``age_limit_hours`` before ``now``."""
    fresh = [it for it in items if is_within_age_limit(it.published_at, now, age_limit_hours)]
    logger.info("%d items within %sh", len(fresh), age_limit_hours)
    return fresh


def matches_keywords(text: str, keywords: Iterable[str], min_matches: int) -> bool:
    """True if at least ``min_matches`` distinct keywords occur in ``text``.

    Plain case-insensitive substring containment, so "AI" also hits
    "maintain". Repeats of one keyword count once.
    """
    lower = text.lower()
    count = 0
    for kw in keywords:
        if kw.lower() in lower:
            count += 1
            if count >= min_matches:
                return True
    return False


def filter_relevant(
    items: Sequence[CandidateItem], keywords: Sequence[str], min_matches: int
) -> list[CandidateItem]:
    relevant = [
        it for it in items
        if matches_keywords(f"{it.title} {it.snippet}", keywords, min_matches)
    ]
    logger.info("%d items match %d+ keywords", len(relevant), min_matches)
    return relevant


def deduplicate(items: Sequence[CandidateItem]) -> list[CandidateItem]:
    """Keep the first item for each exact link string."""
    seen: set[str] = set()
    unique = []
    for it in items:
        if it.link in seen:
            continue
        seen.add(it.link)
        unique.append(it)
    logger.info("%d items after dedup", len(unique))
    return unique


def rank(items: Sequence[CandidateItem], max_items: int) -> list[CandidateItem]:
    """Tier ascending, then newest first; keep the top ``max_items``."""
    # Two stable passes: secondary key first, primary key last.
    ordered = sorted(items, key=lambda it: it.published_at, reverse=True)
    ordered.sort(key=lambda it: it.tier)
    selected = ordered[:max_items]
    logger.info("Selected %d items", len(selected))
    return selected


def curate(
    candidates: Sequence[CandidateItem], now: datetime, config: CurationConfig
) -> list[CandidateItem]:
    """Run the four selection stages in order and return the final list."""
    fresh = filter_recent(candidates, now, config.age_limit_hours)
    relevant = filter_relevant(fresh, config.keywords, config.min_keyword_match)
    unique = deduplicate(relevant)
    return rank(unique, config.max_articles)
