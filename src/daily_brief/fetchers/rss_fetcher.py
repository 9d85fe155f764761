"""
RSS/Atom feed fetcher for the daily brief sources.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

import feedparser
import requests
from bs4 import BeautifulSoup
from dateutil import parser as dateutil_parser

from ..config import DEFAULT_FETCH_TIMEOUT, DEFAULT_SNIPPET_LIMIT, SourceDescriptor

logger = logging.getLogger(__name__)

USER_AGENT = "DailyBrief/1.0 (news digest bot)"


@dataclass(frozen=True)
class CandidateItem:
    """A normalized feed entry, eligible for curation."""
    title: str
    link: str  # Deduplication key, compared verbatim
    source_name: str
    tier: int
    published_at: datetime  # Always timezone-aware
    snippet: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'title': self.title,
            'link': self.link,
            'source': self.source_name,
            'tier': self.tier,
            'published_at': self.published_at.isoformat(),
            'snippet': self.snippet,
        }


class FeedError(Exception):
    """A feed responded, but not with anything feedparser could use."""


class RSSFetcher:
    """Fetches one feed and normalizes its entries into CandidateItems."""

    def __init__(
        self,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        snippet_limit: int = DEFAULT_SNIPPET_LIMIT,
        session_factory: Optional[Callable[[], requests.Session]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.timeout = timeout
        self.snippet_limit = snippet_limit
        # One session per fetch so concurrent fetches never share a cookie jar
        self.session_factory = session_factory or requests.Session
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def _clean_html(self, html: str) -> str:
        if not html:
            return ""
        soup = BeautifulSoup(html, 'lxml')
        for element in soup(['script', 'style']):
            element.decompose()
        text = soup.get_text(separator=' ')
        text = re.sub(r'\s+', ' ', text)
        return text.strip()

    def _parse_date(self, entry: dict) -> Optional[datetime]:
        # dict.get skips FeedParserDict's deprecated updated -> published fallback
        for field_name in ['published_parsed', 'updated_parsed']:
            value = dict.get(entry, field_name)
            if value:
                try:
                    return datetime(*value[:6], tzinfo=timezone.utc)
                except (TypeError, ValueError) as e:
                    logger.debug(f"Failed to parse date from {field_name}: {e}")
        for field_name in ['published', 'updated']:
            value = dict.get(entry, field_name)
            if value:
                try:
                    dt = dateutil_parser.parse(value)
                except (ValueError, OverflowError) as e:
                    logger.debug(f"Failed to parse date string from {field_name}: {e}")
                    continue
                if dt.tzinfo is None:
                    dt = dt.replace(tzinfo=timezone.utc)
                return dt
        return None

    def _extract_text(self, entry: dict) -> str:
        if entry.get('content'):
            html = entry['content'][0].get('value', '')
            if html:
                return self._clean_html(html)
        for field_name in ['summary', 'description']:
            if entry.get(field_name):
                return self._clean_html(entry[field_name])
        return ""

    def _download(self, source: SourceDescriptor) -> feedparser.FeedParserDict:
        with self.session_factory() as session:
            resp = session.get(
                source.endpoint,
                timeout=self.timeout,
                headers={'User-Agent': USER_AGENT},
            )
        resp.raise_for_status()
        feed = feedparser.parse(resp.content)
        if feed.bozo and not feed.entries:
            raise FeedError(f"unparsable feed: {feed.get('bozo_exception')}")
        return feed

    def normalize(self, entry: dict, source: SourceDescriptor, fetched_at: datetime) -> Optional[CandidateItem]:
        """Map one feed entry to a CandidateItem, or None if it lacks a title or link."""
        title = (entry.get('title') or '').strip()
        link = (entry.get('link') or '').strip()
        if not title or not link:
            return None
        return CandidateItem(
            title=title,
            link=link,
            source_name=source.name,
            tier=source.tier,
            published_at=self._parse_date(entry) or fetched_at,
            snippet=self._extract_text(entry)[:self.snippet_limit],
        )

    def fetch(self, source: SourceDescriptor) -> list[CandidateItem]:
        """
        Fetch a single source.

        Never raises: a timeout, transport error, bad status or malformed
        payload is logged as a warning and yields an empty list so the rest
        of the batch is unaffected.
        """
        fetched_at = self.clock()
        try:
            feed = self._download(source)
        except requests.Timeout:
            logger.warning("%s feed failed: timed out after %ss", source.name, self.timeout)
            return []
        except (requests.RequestException, FeedError) as e:
            logger.warning("%s feed failed: %s", source.name, e)
            return []
        except Exception as e:
            logger.warning("%s feed failed: unexpected %s: %s", source.name, type(e).__name__, e)
            return []

        items = []
        for entry in feed.entries:
            item = self.normalize(entry, source, fetched_at)
            if item is not None:
                items.append(item)
        if items:
            logger.debug("Fetched %d items from %s", len(items), source.name)
        return items
