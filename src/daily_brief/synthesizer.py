"""
Briefing synthesis using the Claude API.
"""

import json
import logging
import re
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Optional

import anthropic

from .fetchers.rss_fetcher import CandidateItem

logger = logging.getLogger(__name__)


class SynthesisError(RuntimeError):
    """The model reply could not be turned into a Briefing."""


@dataclass
class BriefingItem:
    category: str
    title: str
    content: str
    link: str
    source: str


@dataclass
class Briefing:
    intro: str = ""
    items: list[BriefingItem] = field(default_factory=list)
    remark: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


class BriefingSynthesizer:
    """
    Condenses the curated articles into a short daily briefing: an intro,
    a handful of categorized summaries and a closing remark.
    """

    SYSTEM_PROMPT = """You are a news editor specializing in AI and technology.
You receive a numbered list of news articles and write a daily briefing in {language}.

Rules:
1. Put each selected article in a fitting category (Hardware, Software, Market, Infra, AI Research, Product, ...).
2. Write each title naturally in {language}.
3. Summarize each article in 2-3 sentences with the key facts and why they matter.
4. Keep the English term next to technical vocabulary, e.g. "large language model (LLM)".
5. The intro gives a 1-2 sentence overview of today's news.
6. The remark gives a 1-2 sentence take on the larger trend behind today's news.
7. Select at most {max_items} articles, only the most important ones.

Respond ONLY with JSON in exactly this shape, no other text:
{{
  "intro": "overview",
  "items": [
    {{"index": 1, "category": "category", "title": "title", "content": "2-3 sentence summary"}}
  ],
  "remark": "closing remark"
}}
"index" is the number of the article in the list you were given."""

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-6",
        max_tokens: int = 4096,
        temperature: float = 0.5,
        language: str = "Korean",
        max_items: int = 7,
    ):
        self.client = anthropic.Anthropic(api_key=api_key)
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.language = language
        self.max_items = max_items

    def _format_articles(self, articles: list[CandidateItem]) -> str:
        blocks = []
        for i, a in enumerate(articles, start=1):
            blocks.append(
                f"[{i}] {a.title}\n"
                f"Source: {a.source_name} (Tier {a.tier})\n"
                f"Date: {a.published_at.isoformat()}\n"
                f"Link: {a.link}\n"
                f"Snippet: {a.snippet}"
            )
        return "\n\n".join(blocks)

    def parse_response(self, text: str, articles: list[CandidateItem]) -> Briefing:
        """Pull the JSON object out of a model reply and attach article links."""
        match = re.search(r"\{[\s\S]*\}", text)
        if not match:
            raise SynthesisError(f"No JSON object in model reply: {text[:500]}")
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise SynthesisError(f"Invalid JSON in model reply: {e}") from e
        if not isinstance(data, dict):
            raise SynthesisError("Model reply JSON is not an object")

        items = []
        for raw in data.get("items") or []:
            try:
                index = int(raw.get("index"))
            except (TypeError, ValueError, AttributeError):
                logger.warning("Dropping briefing item without index: %r", raw)
                continue
            if not 1 <= index <= len(articles):
                logger.warning("Dropping briefing item with unknown index %d", index)
                continue
            article = articles[index - 1]
            items.append(BriefingItem(
                category=str(raw.get("category", "")),
                title=str(raw.get("title") or article.title),
                content=str(raw.get("content", "")),
                link=article.link,
                source=article.source_name,
            ))

        return Briefing(
            intro=str(data.get("intro", "")),
            items=items,
            remark=str(data.get("remark", "")),
        )

    def synthesize(self, articles: list[CandidateItem], date: Optional[datetime] = None) -> Briefing:
        if not articles:
            logger.info("No articles to synthesize")
            return Briefing()

        if date is None:
            date = datetime.now()

        system_prompt = self.SYSTEM_PROMPT.format(
            language=self.language, max_items=self.max_items
        )
        user_prompt = (
            f"Today's date: {date.strftime('%B %d, %Y')}\n\n"
            f"--- Collected news ({len(articles)} articles) ---\n\n"
            f"{self._format_articles(articles)}"
        )

        try:
            logger.info("Calling Claude API (%s) with %d articles", self.model, len(articles))
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except anthropic.APIError as e:
            logger.error(f"Anthropic API error: {e}")
            raise

        briefing = self.parse_response(response.content[0].text, articles)
        logger.info(
            "Briefing synthesis complete: %d items. Input tokens: %d, Output tokens: %d",
            len(briefing.items),
            response.usage.input_tokens,
            response.usage.output_tokens,
        )
        return briefing
