# Content fetchers for the daily brief
"""
Fetchers for extracting content from:
- RSS/Atom feeds (news sites, company blogs)
"""

from .rss_fetcher import RSSFetcher, CandidateItem, FeedError

__all__ = ['RSSFetcher', 'CandidateItem', 'FeedError']
