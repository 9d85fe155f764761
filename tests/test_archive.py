import json
import tempfile
import unittest
from datetime import date, datetime, timezone
from pathlib import Path

from src.archive import archive_path, save_briefing
from src.daily_brief.fetchers.rss_fetcher import CandidateItem
from src.daily_brief.synthesizer import Briefing, BriefingItem

ARTICLE = CandidateItem(
    title="AI타임스: 생성형 AI 스타트업 투자 확대",
    link="https://www.aitimes.com/news/1",
    source_name="AI타임스",
    tier=2,
    published_at=datetime(2026, 10, 17, 0, 30, tzinfo=timezone.utc),
    snippet="",
)


class TestSaveBriefing(unittest.TestCase):
    def test_writes_dated_json(self):
        briefing = Briefing(
            intro="Intro",
            items=[BriefingItem("Market", "Funding", "Summary.", ARTICLE.link, ARTICLE.source_name)],
            remark="Remark",
        )
        with tempfile.TemporaryDirectory() as tmp:
            out = save_briefing(Path(tmp) / "archive", date(2026, 10, 17), briefing, [ARTICLE])

            self.assertEqual(out.name, "daily-20261017.json")
            text = out.read_text(encoding="utf-8")
            self.assertIn("AI타임스", text)
            payload = json.loads(text)

        self.assertEqual(payload["date"], "2026-10-17")
        self.assertEqual(payload["briefing"]["items"][0]["link"], "https://www.aitimes.com/news/1")
        self.assertEqual(payload["articles"][0]["published_at"], "2026-10-17T00:30:00+00:00")
        self.assertEqual(payload["articles"][0]["tier"], 2)

    def test_archive_path(self):
        self.assertEqual(archive_path("data/archive", date(2026, 1, 5)), Path("data/archive/daily-20260105.json"))


if __name__ == "__main__":
    unittest.main()
