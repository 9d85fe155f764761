"""Concurrent fan-out of feed fetches over the whole source registry."""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, Optional, Sequence

from .config import ConfigError, SourceDescriptor
from .fetchers.rss_fetcher import CandidateItem

logger = logging.getLogger(__name__)

FetchFn = Callable[[SourceDescriptor], list[CandidateItem]]


def aggregate(
    sources: Sequence[SourceDescriptor],
    fetch: FetchFn,
    max_workers: Optional[int] = None,
) -> list[CandidateItem]:
    """Fetch every source concurrently and concatenate the results.

    Waits for all fetches to settle. A fetch that raises anyway contributes
    nothing; it never cancels or drops the other sources. Output follows
    registry order, not completion order.

    Args:
        sources:     Ordered source registry. Must not be empty.
        fetch:       Per-source fetch function, e.g. ``RSSFetcher().fetch``.
        max_workers: Thread pool size (defaults to one thread per source).

    Returns:
        Flattened list of candidate items.
    """
    if not sources:
        raise ConfigError("source registry is empty")

    workers = max_workers or len(sources)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fetch") as ex:
        futures = [ex.submit(fetch, source) for source in sources]
        wait(futures)

    all_items: list[CandidateItem] = []
    for source, fut in zip(sources, futures):
        try:
            items = fut.result()
        except Exception as e:
            logger.warning("%s feed failed: %s", source.name, e)
            continue
        all_items.extend(items or [])

    logger.info("Collected %d items from %d feeds", len(all_items), len(sources))
    return all_items
