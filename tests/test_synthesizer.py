import json
import unittest
from datetime import datetime, timezone
from unittest import mock

from src.daily_brief.fetchers.rss_fetcher import CandidateItem
from src.daily_brief.synthesizer import Briefing, BriefingSynthesizer, SynthesisError

NOW = datetime(2026, 10, 17, 9, 0, tzinfo=timezone.utc)

ARTICLES = [
    CandidateItem("OpenAI previews its next LLM", "https://press.example.com/1", "Tech Press", 2, NOW, "Benchmarks."),
    CandidateItem("Nvidia ships a new GPU", "https://press.example.com/2", "Tech Press", 2, NOW, "Data center."),
]

REPLY = {
    "intro": "Big model and chip news today.",
    "items": [
        {"index": 2, "category": "Hardware", "title": "New Nvidia GPU", "content": "Faster training."},
        {"index": 1, "category": "AI Research", "title": "Next OpenAI LLM", "content": "Strong benchmarks."},
        {"index": 9, "category": "Market", "title": "Hallucinated", "content": "Not in the list."},
    ],
    "remark": "Compute keeps getting cheaper.",
}


def api_response(text):
    response = mock.Mock()
    response.content = [mock.Mock(text=text)]
    response.usage.input_tokens = 1200
    response.usage.output_tokens = 300
    return response


class TestBriefingSynthesizer(unittest.TestCase):
    def setUp(self):
        patcher = mock.patch("src.daily_brief.synthesizer.anthropic.Anthropic")
        self.client_cls = patcher.start()
        self.addCleanup(patcher.stop)
        self.client = self.client_cls.return_value
        self.synth = BriefingSynthesizer(api_key="test-key", model="claude-test", language="English")

    def test_fenced_json_reply_is_parsed(self):
        self.client.messages.create.return_value = api_response(f"```json\n{json.dumps(REPLY)}\n```")

        briefing = self.synth.synthesize(ARTICLES, date=NOW)

        self.assertEqual(briefing.intro, "Big model and chip news today.")
        self.assertEqual(briefing.remark, "Compute keeps getting cheaper.")
        self.assertEqual([it.link for it in briefing.items], ["https://press.example.com/2", "https://press.example.com/1"])
        self.assertEqual(briefing.items[0].category, "Hardware")
        self.assertEqual(briefing.items[0].source, "Tech Press")

    def test_prompt_lists_numbered_articles(self):
        self.client.messages.create.return_value = api_response(json.dumps(REPLY))

        self.synth.synthesize(ARTICLES, date=NOW)

        kwargs = self.client.messages.create.call_args.kwargs
        self.assertEqual(kwargs["model"], "claude-test")
        self.assertIn("English", kwargs["system"])
        user_prompt = kwargs["messages"][0]["content"]
        self.assertIn("[1] OpenAI previews its next LLM", user_prompt)
        self.assertIn("[2] Nvidia ships a new GPU", user_prompt)
        self.assertIn("Link: https://press.example.com/2", user_prompt)
        self.assertIn("October 17, 2026", user_prompt)

    def test_no_articles_skips_api_call(self):
        briefing = self.synth.synthesize([])
        self.assertEqual(briefing, Briefing())
        self.client.messages.create.assert_not_called()

    def test_reply_without_json_raises(self):
        self.client.messages.create.return_value = api_response("Sorry, I can't help with that.")
        with self.assertRaises(SynthesisError):
            self.synth.synthesize(ARTICLES, date=NOW)

    def test_broken_json_raises(self):
        self.client.messages.create.return_value = api_response('{"intro": "cut off", "items": [')
        with self.assertRaises(SynthesisError):
            self.synth.synthesize(ARTICLES, date=NOW)

    def test_item_without_index_is_dropped(self):
        reply = {"intro": "", "items": [{"category": "Product", "title": "?", "content": "?"}], "remark": ""}
        briefing = self.synth.parse_response(json.dumps(reply), ARTICLES)
        self.assertEqual(briefing.items, [])


if __name__ == "__main__":
    unittest.main()
