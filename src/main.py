#!/usr/bin/env python3
"""
Daily Brief — AI news briefing orchestrator.

Collects the configured RSS feeds, curates the freshest relevant articles,
summarizes them via Claude and archives the result as dated JSON.

Usage:
    python -m src.main                 # Full run: fetch, curate, synthesize, archive
    python -m src.main --dry-run       # Archive curated articles, skip synthesis
    python -m src.main --config PATH   # Use another config file
    python -m src.main --verbose       # Enable debug logging
"""

import argparse
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import yaml

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.daily_brief import pipeline
from src.daily_brief.config import ConfigError, CurationConfig
from src.daily_brief.synthesizer import Briefing, BriefingSynthesizer, SynthesisError
from src.archive import save_briefing

logger = logging.getLogger(__name__)


def setup_logging(log_file: Path = None, verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        handlers=handlers,
    )


def load_config(path: Path = None) -> dict:
    path = path or PROJECT_ROOT / "config" / "config.yaml"
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_credentials() -> dict:
    """Load credentials from env vars (priority) or credentials.yaml."""
    creds = {
        "anthropic": {"api_key": os.environ.get("ANTHROPIC_API_KEY", "")},
    }
    path = PROJECT_ROOT / "config" / "credentials.yaml"
    if path.exists():
        with open(path) as f:
            file_creds = yaml.safe_load(f) or {}
        for section, values in file_creds.items():
            if section not in creds:
                creds[section] = {}
            for key, value in values.items():
                if not creds[section].get(key):
                    creds[section][key] = value
    return creds


def main(argv: list[str] = None) -> int:
    parser = argparse.ArgumentParser(description="Daily Brief — AI news briefing")
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--dry-run", action="store_true", help="Skip synthesis, archive curated articles only")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    paths_cfg = config.get("paths", {})
    log_path = PROJECT_ROOT / paths_cfg.get("log_file", "logs/daily_brief.log")
    setup_logging(log_path, args.verbose)

    logger.info("=== Daily Brief — starting daily run ===")

    try:
        curation_config = CurationConfig.from_dict(config)
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    articles = pipeline.run(curation_config)
    if not articles:
        logger.info("No articles collected — nothing to report today.")
        return 0

    timezone_name = config.get("timezone", "Asia/Seoul")
    today = datetime.now(ZoneInfo(timezone_name))
    archive_dir = PROJECT_ROOT / paths_cfg.get("archive_dir", "data/archive")

    if args.dry_run:
        save_briefing(archive_dir, today.date(), Briefing(), articles)
        logger.info("Dry run — skipped synthesis for %d articles", len(articles))
        return 0

    credentials = load_credentials()
    api_key = credentials.get("anthropic", {}).get("api_key", "")
    if not api_key:
        logger.error("ANTHROPIC_API_KEY not set — aborting")
        return 1

    synthesis_cfg = config.get("synthesis", {})
    synthesizer = BriefingSynthesizer(
        api_key=api_key,
        model=synthesis_cfg.get("model", "claude-sonnet-4-6"),
        max_tokens=synthesis_cfg.get("max_tokens", 4096),
        temperature=synthesis_cfg.get("temperature", 0.5),
        language=synthesis_cfg.get("language", "Korean"),
        max_items=synthesis_cfg.get("max_items", 7),
    )
    try:
        briefing = synthesizer.synthesize(articles, date=today)
    except SynthesisError as e:
        logger.error("Could not parse briefing: %s", e)
        return 1
    except Exception:
        logger.exception("Briefing synthesis failed")
        return 1

    out_path = save_briefing(archive_dir, today.date(), briefing, articles)
    logger.info("=== Daily Brief — saved %s ===", out_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
