"""
Command line access to the public, read-only leaderboard views.

    python -m warboard clans [--search TEXT]
    python -m warboard leaderboard SLUG
    python -m warboard export SLUG [--output FILE]
"""

import argparse
import asyncio
import sys
from pathlib import Path

from warboard.config import Config
from warboard.database.database import Database
from warboard.operations import ClanOperations, PlayerOperations
from warboard.services.leaderboard import LeaderboardService
from warboard.utils.exceptions import WarboardException
from warboard.utils.logger import setup_logger

logger = setup_logger(__name__)


def _format_signed(value: int, suffix: str = "") -> str:
    return f"{value:+d}{suffix}"


async def _run(args: argparse.Namespace) -> int:
    db = Database()
    await db.initialize()
    try:
        service = LeaderboardService(
            ClanOperations(db.session_factory),
            PlayerOperations(db.session_factory),
        )
        
        if args.command == "clans":
            clans = await service.search_clans(args.search)
            if not clans:
                print("No clans found.")
            for clan in clans:
                print(f"{clan.slug}\t{clan.name}")
            return 0
        
        clan, rows = await service.get_public_leaderboard(args.slug)
        
        if args.command == "leaderboard":
            print(f"{clan.name} ({len(rows)} players)")
            for row in rows:
                print(
                    f"{row.rank:>3}. {row.name:<24} "
                    f"{_format_signed(row.net_stars, '*'):>6} {_format_signed(row.net_pct, '%'):>7}"
                )
            return 0
        
        csv_text = LeaderboardService.export_csv(rows)
        if args.output == "-":
            sys.stdout.write(csv_text)
        else:
            Path(args.output).write_text(csv_text, encoding="utf-8")
            print(f"exported: {len(rows)} rows -> {args.output}")
        return 0
    finally:
        await db.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="warboard", description="Clan war leaderboard (public views).")
    subparsers = parser.add_subparsers(dest="command", required=True)
    
    clans = subparsers.add_parser("clans", help="List clans.")
    clans.add_argument("--search", default="", help="Case-insensitive name filter.")
    
    leaderboard = subparsers.add_parser("leaderboard", help="Show a clan's ranked leaderboard.")
    leaderboard.add_argument("slug", help="Clan slug.")
    
    export = subparsers.add_parser("export", help="Export a clan's leaderboard as CSV.")
    export.add_argument("slug", help="Clan slug.")
    export.add_argument(
        "--output", default=Config.EXPORT_FILENAME,
        help=f"Output file, or - for stdout (default: {Config.EXPORT_FILENAME})."
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        Config.validate()
        return asyncio.run(_run(args))
    except WarboardException as exc:
        print(exc.user_message, file=sys.stderr)
        return 1
    except Exception as exc:
        logger.error(f"warboard {args.command} failed: {type(exc).__name__}: {exc}", exc_info=True)
        print(f"warboard {args.command} failed: {type(exc).__name__}: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
