"""CLI entry point for slacksift."""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

import httpx
from pydantic import ValidationError

from slacksift.core.config import Settings
from slacksift.core.errors import CrossOriginBlocked, SlackAPIError
from slacksift.core.schemas import ScoredMessage, SearchCriteria
from slacksift.pipeline.deleter import delete_selected, prune_messages
from slacksift.pipeline.exporter import (
    export_csv,
    export_json,
    load_export_json,
    select_for_export,
)
from slacksift.pipeline.orchestrator import run_search
from slacksift.platforms.slack.client import SlackClient
from slacksift.scoring import available_providers, get_provider
from slacksift.scoring.base import relevance_band
from slacksift.scoring.scorer import RelevanceScorer

SLACK_TOKEN_ENV = "SLACK_TOKEN"

CORS_HELP = (
    "The Slack API rejected the request because of a cross-origin policy.\n"
    "Route requests through a relay by setting slack.proxy_url in the config, e.g.\n"
    "  proxy_url: https://cors-anywhere.herokuapp.com/"
)


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default="config/settings.yaml",
        help="Path to settings YAML file (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Search Slack, rank messages by AI relevance, export or delete them",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- validate ---
    validate_parser = subparsers.add_parser("validate", help="Check the configured credentials")
    _add_common(validate_parser)

    # --- search ---
    search_parser = subparsers.add_parser("search", help="Search and rank messages")
    _add_common(search_parser)
    search_parser.add_argument("--prompt", default="", help="Free-text search intent")
    search_parser.add_argument("--channel", default="", help="Restrict to a channel")
    search_parser.add_argument("--user", default="", help="Restrict to a user")
    search_parser.add_argument("--date-from", default="", help="Only messages after YYYY-MM-DD")
    search_parser.add_argument("--date-to", default="", help="Only messages before YYYY-MM-DD")
    search_parser.add_argument(
        "--min-score",
        type=int,
        default=0,
        help="Only show/export messages scoring at least this much (default: 0)",
    )
    search_parser.add_argument(
        "--export",
        choices=["csv", "json"],
        help="Export results to format (csv, json)",
    )
    search_parser.add_argument(
        "--output",
        help="Export file path (default: slack-messages.<format>)",
    )
    search_parser.add_argument(
        "--select",
        nargs="+",
        metavar="ID",
        help="Export only these message ids (default: all shown messages)",
    )

    # --- delete ---
    delete_parser = subparsers.add_parser(
        "delete",
        help="Delete messages listed in a JSON export",
    )
    _add_common(delete_parser)
    delete_parser.add_argument(
        "--from-export",
        required=True,
        help="Path to a JSON export produced by 'search --export json'",
    )
    target = delete_parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--ids", nargs="+", help="Message ids to delete")
    target.add_argument("--all", action="store_true", help="Delete every message in the export")
    delete_parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Skip the confirmation prompt",
    )

    # --- providers ---
    providers_parser = subparsers.add_parser("providers", help="List scoring providers and models")
    providers_parser.add_argument("--verbose", "-v", action="store_true", help=argparse.SUPPRESS)

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def load_settings(path: str) -> Settings:
    """Load YAML settings and fill blank credentials from the environment."""
    settings = Settings.from_yaml(path)
    provider = get_provider(settings.scoring.provider)
    return settings.with_overrides(
        slack_token=os.environ.get(SLACK_TOKEN_ENV),
        scoring_api_key=os.environ.get(provider.env_var),
    )


async def cmd_validate(settings: Settings) -> int:
    """Handle validate subcommand."""
    slack_ok = bool(settings.slack.token) and await SlackClient(settings.slack).validate_token()
    scoring_ok = settings.scoring.has_plausible_key()

    print(f"Slack token:  {'valid' if slack_ok else 'INVALID'}")
    print(f"Scoring key:  {'present' if scoring_ok else 'MISSING or too short'} "
          f"({settings.scoring.provider})")
    return 0 if slack_ok and scoring_ok else 1


async def cmd_search(settings: Settings, args: argparse.Namespace) -> int:
    """Handle search subcommand."""
    if not settings.slack.token or not settings.scoring.api_key:
        print("Error: configure both the Slack token and the scoring API key", file=sys.stderr)
        return 1

    criteria = SearchCriteria(
        prompt_text=args.prompt,
        channel_filter=args.channel,
        user_filter=args.user,
        date_from=args.date_from,
        date_to=args.date_to,
    )
    outcome = await run_search(
        criteria,
        SlackClient(settings.slack),
        RelevanceScorer(settings.scoring),
    )

    if outcome.no_results:
        print(outcome.notice)
        return 0

    messages = [m for m in outcome.messages if m.relevance_score >= args.min_score]
    _print_messages(messages)

    if args.export:
        output = Path(args.output or f"slack-messages.{args.export}")
        selected = select_for_export(messages, args.select)
        if args.export == "csv":
            output.write_text(export_csv(selected))
        else:
            output.write_text(export_json(selected, criteria))
        print(f"\nExported {len(selected)} messages to {output}")

    return 0


async def cmd_delete(settings: Settings, args: argparse.Namespace) -> int:
    """Handle delete subcommand."""
    export_path = Path(args.from_export)
    if not export_path.exists():
        print(f"Error: export file not found: {export_path}", file=sys.stderr)
        return 1

    data = load_export_json(export_path.read_text())
    ids = [m.id for m in data.messages] if args.all else list(dict.fromkeys(args.ids))

    if not ids:
        print("Nothing to delete.")
        return 0

    if not args.yes:
        answer = input(
            f"Are you sure you want to delete {len(ids)} messages? This cannot be undone. [y/N] "
        )
        if answer.strip().lower() not in ("y", "yes"):
            print("Aborted.")
            return 1

    report = await delete_selected(data.messages, ids, SlackClient(settings.slack))
    print(f"Successfully deleted {report.deleted_count} messages")
    if report.failed_ids:
        print(f"  Failed: {', '.join(report.failed_ids)}")
    if report.missing_ids:
        print(f"  Not in export: {', '.join(report.missing_ids)}")

    remaining = data.model_copy(
        update={"messages": prune_messages(data.messages, report.deleted_ids)},
    )
    export_path.write_text(remaining.model_dump_json(by_alias=True, indent=2))
    return 0


def cmd_providers() -> None:
    """Handle providers subcommand."""
    for tag in available_providers():
        provider = get_provider(tag)
        print(f"{tag}: default {provider.default_model} "
              f"(models: {', '.join(provider.known_models)}; key: {provider.env_var})")


def _print_messages(messages: list[ScoredMessage]) -> None:
    print(f"{len(messages)} messages, most relevant first:\n")
    for m in messages:
        text = " ".join(m.text.split())
        if len(text) > 100:
            text = text[:97] + "..."
        print(f"[{m.relevance_score:3d} {relevance_band(m.relevance_score):<6}] "
              f"#{m.channel} {m.author} {m.timestamp}")
        print(f"    {text}")
        print(f"    id={m.id} {m.permalink}")


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    if args.command == "providers":
        cmd_providers()
        return

    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.command == "validate":
            code = asyncio.run(cmd_validate(settings))
        elif args.command == "search":
            code = asyncio.run(cmd_search(settings, args))
        else:
            code = asyncio.run(cmd_delete(settings, args))
    except CrossOriginBlocked:
        print(CORS_HELP, file=sys.stderr)
        sys.exit(1)
    except SlackAPIError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except httpx.HTTPError as e:
        print(f"Network error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValidationError as e:
        print(f"Error reading export: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(code)


if __name__ == "__main__":
    main()
