"""
Daily brief collection pipeline.

Fetches every configured feed concurrently, then narrows the pool down to
the fresh, relevant, deduplicated top articles.

Returns the curated articles (does not summarize or archive).
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from .aggregator import aggregate
from .config import CurationConfig
from .curation import curate
from .fetchers.rss_fetcher import CandidateItem, RSSFetcher

log = logging.getLogger(__name__)


def run(
    config: CurationConfig,
    now: Optional[datetime] = None,
    fetcher: Optional[RSSFetcher] = None,
) -> list[CandidateItem]:
    """
    Run the collection pipeline.

    Args:
        config:   Validated source registry and thresholds
        now:      Reference time for the age filter (defaults to current UTC)
        fetcher:  Fetcher to use (defaults to one built from config)

    Returns:
        Up to config.max_articles articles, best first. May be empty.
    """
    log.info("=== Daily brief collection: %d feeds ===", len(config.sources))

    if fetcher is None:
        fetcher = RSSFetcher(timeout=config.fetch_timeout, snippet_limit=config.snippet_limit)

    candidates = aggregate(config.sources, fetcher.fetch)

    if now is None:
        now = datetime.now(timezone.utc)
    articles = curate(candidates, now, config)

    if not articles:
        log.info("No articles survived curation")
    return articles
