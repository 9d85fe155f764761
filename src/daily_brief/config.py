"""
Source registry and curation thresholds.

The raw YAML dict from config/config.yaml is turned into an immutable
CurationConfig before anything touches the network, so a malformed registry
fails fast as a ConfigError instead of halfway through a run.
"""

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

VALID_TIERS = (1, 2, 3)

DEFAULT_MIN_KEYWORD_MATCH = 2
DEFAULT_MAX_ARTICLES = 10
DEFAULT_AGE_LIMIT_HOURS = 24
DEFAULT_FETCH_TIMEOUT = 10.0
DEFAULT_SNIPPET_LIMIT = 500


class ConfigError(ValueError):
    """Raised when the source registry or thresholds are unusable."""


@dataclass(frozen=True)
class SourceDescriptor:
    """One configured feed."""
    name: str
    endpoint: str
    tier: int


@dataclass(frozen=True)
class CurationConfig:
    sources: tuple[SourceDescriptor, ...]
    keywords: tuple[str, ...]
    min_keyword_match: int = DEFAULT_MIN_KEYWORD_MATCH
    max_articles: int = DEFAULT_MAX_ARTICLES
    age_limit_hours: float = DEFAULT_AGE_LIMIT_HOURS
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    snippet_limit: int = DEFAULT_SNIPPET_LIMIT
    tiers: tuple[int, ...] = field(default=VALID_TIERS)

    @classmethod
    def from_dict(cls, config: dict) -> "CurationConfig":
        """
        Build a validated config from the parsed config.yaml.

        Expects a top-level ``sources`` list of {name, url, tier} mappings,
        a ``keywords`` list and an optional ``curation`` block with the
        numeric thresholds.
        """
        sources = parse_sources(config.get("sources") or [])
        keywords = parse_keywords(config.get("keywords") or [])

        curation = config.get("curation") or {}
        try:
            thresholds = dict(
                min_keyword_match=int(curation.get("min_keyword_match", DEFAULT_MIN_KEYWORD_MATCH)),
                max_articles=int(curation.get("max_articles", DEFAULT_MAX_ARTICLES)),
                age_limit_hours=float(curation.get("age_limit_hours", DEFAULT_AGE_LIMIT_HOURS)),
                fetch_timeout=float(curation.get("fetch_timeout", DEFAULT_FETCH_TIMEOUT)),
                snippet_limit=int(curation.get("snippet_limit", DEFAULT_SNIPPET_LIMIT)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"invalid curation setting: {e}") from e
        built = cls(sources=sources, keywords=keywords, **thresholds)
        logger.debug(
            "Loaded %d sources, %d keywords", len(built.sources), len(built.keywords)
        )
        return built

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if not self.sources:
            raise ConfigError("source registry is empty")
        if not self.keywords:
            raise ConfigError("keywords list is empty")
        for kw in self.keywords:
            if not isinstance(kw, str) or not kw:
                raise ConfigError(f"keyword {kw!r} is not a non-empty string")
        for name, value in (
            ("min_keyword_match", self.min_keyword_match),
            ("max_articles", self.max_articles),
            ("age_limit_hours", self.age_limit_hours),
            ("fetch_timeout", self.fetch_timeout),
            ("snippet_limit", self.snippet_limit),
        ):
            if value <= 0:
                raise ConfigError(f"{name} must be positive, got {value}")
        for source in self.sources:
            if isinstance(source.tier, bool) or source.tier not in self.tiers:
                raise ConfigError(
                    f"source {source.name!r} has tier {source.tier}, expected one of {self.tiers}"
                )


def parse_sources(raw_sources: list) -> tuple[SourceDescriptor, ...]:
    """Turn the YAML ``sources`` list into descriptors, keeping registry order."""
    if not raw_sources:
        raise ConfigError("source registry is empty")

    sources = []
    seen_names: set[str] = set()
    for index, entry in enumerate(raw_sources):
        if not isinstance(entry, dict):
            raise ConfigError(f"source #{index} is not a mapping: {entry!r}")
        name = str(entry.get("name") or "").strip()
        endpoint = str(entry.get("url") or entry.get("endpoint") or "").strip()
        if not name:
            raise ConfigError(f"source #{index} has no name")
        if not endpoint:
            raise ConfigError(f"source {name!r} has no url")
        if name in seen_names:
            raise ConfigError(f"duplicate source name {name!r}")
        tier = entry.get("tier")
        # bool is an int subclass; YAML ``true`` must not read as tier 1
        if isinstance(tier, bool) or not isinstance(tier, int):
            raise ConfigError(f"source {name!r} has invalid tier {tier!r}")
        if tier not in VALID_TIERS:
            raise ConfigError(f"source {name!r} has tier {tier}, expected one of {VALID_TIERS}")
        seen_names.add(name)
        sources.append(SourceDescriptor(name=name, endpoint=endpoint, tier=tier))
    return tuple(sources)


def parse_keywords(raw_keywords: list) -> tuple[str, ...]:
    """
    Validate the YAML ``keywords`` list.

    Unquoted ``yes``/``no``/``on`` load as booleans under YAML 1.1; they are
    rejected rather than matched as "True"/"False".
    """
    keywords = []
    for kw in raw_keywords:
        if not isinstance(kw, str):
            raise ConfigError(f"keyword {kw!r} is not a string; quote it in config.yaml")
        if kw.strip():
            keywords.append(kw.strip())
    if not keywords:
        raise ConfigError("keywords list is empty")
    return tuple(keywords)
