"""Scrape episodes, hints and burgers from the Bob's Burgers wiki into the database.

Usage:
    uv run python bin/scrape-wiki.py
    uv run python bin/scrape-wiki.py --limit 5 --dry-run

Reads WIKI_* settings and DAYDLE_DATABASE_PATH (not needed with --dry-run).
Run bin/seed-puzzles.py afterwards to schedule the imported burgers.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "backend"))

from shared.db import Database, SqliteEpisodeRepository
from shared.logging import setup_logging
from web.server.settings import WebServerSettings
from wiki.importer import import_episodes
from wiki.scraper import ScrapedEpisodeData, WikiFetchError, WikiScraper
from wiki.settings import WikiScraperSettings


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--limit", type=int, default=None, help="only scrape the first N episodes")
    parser.add_argument("--dry-run", action="store_true", help="print what would be imported, write nothing")
    return parser.parse_args(argv)


def _print_preview(results: list[ScrapedEpisodeData]) -> None:
    burger_count = 0
    for data in results:
        print(f"  {data.episode.code}: {data.episode.title}")
        if data.details.plot_summary:
            print(f"    Plot: {data.details.plot_summary[:60]}...")
        if data.gags.store_next_door:
            print(f"    Store: {data.gags.store_next_door}")
        if data.gags.pest_control_truck:
            print(f"    Truck: {data.gags.pest_control_truck}")
        for burger in data.gags.burgers:
            suffix = f" {burger.description}" if burger.description else ""
            print(f"    Burger: {burger.name}{suffix}")
            burger_count += 1
    print(f"\nTotal: {len(results)} episodes, {burger_count} burgers")


async def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    wiki_settings = WikiScraperSettings()
    web_settings = WebServerSettings()

    if not args.dry_run and web_settings.database_path is None:
        print("Error: DAYDLE_DATABASE_PATH is not set (use --dry-run to preview)")
        return 1

    async with WikiScraper(wiki_settings) as scraper:
        try:
            episodes = await scraper.scrape_episode_list()
        except WikiFetchError as e:
            print(f"Error: {e}")
            return 1
        if args.limit is not None:
            episodes = episodes[: args.limit]
        print(f"Scraping {len(episodes)} episodes...")
        results = await scraper.scrape_episodes(episodes)

    if args.dry_run:
        _print_preview(results)
        return 0

    db = Database(web_settings.database_path)
    db.connect()
    try:
        summary = await import_episodes(results, SqliteEpisodeRepository(db))
    finally:
        db.close()

    print(f"Episodes: {summary.episodes}")
    print(f"Burgers: {summary.burgers}")
    if summary.burgers > 0:
        print("Next: uv run python bin/seed-puzzles.py")
    return 0


if __name__ == "__main__":
    load_dotenv()
    setup_logging()
    sys.exit(asyncio.run(main()))
