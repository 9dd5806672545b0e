#!/usr/bin/env python3
"""Command-line entry point for the music room engine."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import logging.config
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from music_room.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from music_room.config.container import Container

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"


def setup_logging(log_level: str = "INFO") -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.basicConfig(
            level=resolved_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.warning(LogTemplates.LOGGING_CONFIG_FALLBACK, _LOGGING_CONFIG_PATH)

    logging.getLogger().setLevel(resolved_level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="music-room",
        description="Vote-ranked listening events and collaborative track lists.",
    )
    parser.add_argument(
        "--database-url",
        help="Override DATABASE__URL (e.g. sqlite:///data/music_room.db)",
    )
    parser.add_argument("--log-level", help="Override LOG_LEVEL")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("init-db", help="Create the database schema if it does not exist")
    stats = sub.add_parser("stats", help="Print row counts per table")
    stats.add_argument("--json", action="store_true", help="Emit JSON instead of text")
    return parser


async def _init_db(container: Container) -> int:
    await container.initialize()
    print(f"Database ready at {container.database.db_path}")
    return 0


async def _stats(container: Container, as_json: bool) -> int:
    await container.initialize()
    stats = await container.database.get_stats()
    if as_json:
        print(json.dumps(stats, indent=2, sort_keys=True))
    else:
        print(f"Database: {stats['db_path']}")
        for table, count in stats["tables"].items():
            print(f"  {table:<24} {count}")
    return 1 if "error" in stats else 0


async def _run(args: argparse.Namespace) -> int:
    from music_room.config.container import create_container
    from music_room.config.settings import DatabaseSettings, get_settings

    settings = get_settings()
    if args.database_url:
        database = DatabaseSettings.model_validate(
            {**settings.database.model_dump(), "url": args.database_url}
        )
        settings = settings.model_copy(update={"database": database})

    container = create_container(settings)
    try:
        if args.command == "init-db":
            return await _init_db(container)
        return await _stats(container, args.json)
    finally:
        await container.shutdown()


def main(argv: Sequence[str] | None = None) -> int:
    from music_room.config.settings import get_settings

    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(args.log_level or settings.log_level)

    logger = logging.getLogger(__name__)
    logger.info(LogTemplates.APP_STARTING.format(environment=settings.environment))

    try:
        return asyncio.run(_run(args))
    except KeyboardInterrupt:
        return 130
    except Exception as e:
        logger.exception(LogTemplates.COMMAND_FAILED, args.command, e)
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
