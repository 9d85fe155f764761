"""
Daily briefing archive.

Archive format:  data/archive/daily-YYYYMMDD.json
"""

import json
import logging
from datetime import date as date_type
from pathlib import Path

from src.daily_brief.fetchers.rss_fetcher import CandidateItem
from src.daily_brief.synthesizer import Briefing

logger = logging.getLogger(__name__)


def archive_path(archive_dir: str | Path, day: date_type) -> Path:
    return Path(archive_dir) / f"daily-{day.strftime('%Y%m%d')}.json"


def save_briefing(
    archive_dir: str | Path,
    day: date_type,
    briefing: Briefing,
    articles: list[CandidateItem],
) -> Path:
    """
    Save today's briefing and the articles it was built from.

    Args:
        archive_dir: Directory holding the daily JSON files
        day:         Date the briefing is for
        briefing:    Synthesized briefing (empty on a dry run)
        articles:    Curated articles, best first

    Returns:
        Path of the written file.
    """
    out_path = archive_path(archive_dir, day)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "date": day.isoformat(),
        "briefing": briefing.to_dict(),
        "articles": [a.to_dict() for a in articles],
    }
    out_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    logger.info("Saved briefing archive: %s", out_path)
    return out_path
