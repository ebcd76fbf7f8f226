"""Standalone CLI for seeding the directory and chatting with a city.

Usage::

    python -m localscout.cli seed --file data/bournemouth.json
    python -m localscout.cli ask --city bournemouth "greek food near the pier"
    python -m localscout.cli ask --city bournemouth          # interactive
    python -m localscout.cli ask --city bournemouth --json "any deals?"

``seed`` writes businesses, offers and events to the SQLite store.  A
top-level ``knowledge`` list (documents with ``id``, ``city`` and
``content``) is also embedded into ChromaDB when ``SEMANTIC_ENABLED`` is
set and an OpenAI key is available.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections import defaultdict
from pathlib import Path
from typing import Any
from uuid import uuid4

from localscout.config.settings import Settings
from localscout.models.response import ChatResponse
from localscout.utils.errors import LocalScoutError
from localscout.utils.logging import configure_logging

_EXIT_WORDS = {"quit", "exit", "bye"}


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def _format_text(response: ChatResponse) -> str:
    """Render a turn response as a readable terminal block."""
    lines = [response.message]

    if response.business_cards:
        lines.append("")
        lines.append("Featured:")
        for card in response.business_cards:
            reason = f" [{card.reason.label}]" if card.reason is not None else ""
            lines.append(f"  * {card.name} ({card.category}){reason}")

    if response.wallet_actions:
        lines.append("")
        lines.append("Offers:")
        for action in response.wallet_actions:
            lines.append(f"  + {action.offer_name} at {action.business_name}")

    if response.event_cards:
        lines.append("")
        lines.append("Events:")
        for event in response.event_cards:
            when = event.start_date.isoformat()
            if event.start_time:
                when = f"{when} {event.start_time}"
            lines.append(f"  - {event.title} ({when}, {event.location})")

    if response.map_pins:
        lines.append("")
        lines.append(f"Map: {len(response.map_pins)} pins")

    return "\n".join(lines)


def _format_json(response: ChatResponse) -> str:
    return json.dumps(response.model_dump(mode="json"), indent=2)


def _log_to_stderr(app_settings: Settings) -> None:
    # Importing localscout.main points logging at stdout; answers own stdout here.
    configure_logging(log_level=app_settings.log_level, stream=sys.stderr)


def _group_knowledge(documents: list[dict[str, Any]]) -> dict[str, list[dict[str, Any]]]:
    """Bucket knowledge documents by lowercase city, skipping city-less ones."""
    grouped: dict[str, list[dict[str, Any]]] = defaultdict(list)
    for doc in documents:
        city = str(doc.get("city") or "").strip().lower()
        if city and doc.get("id") and doc.get("content"):
            grouped[city].append(doc)
    return dict(grouped)


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------


async def _handle_seed(args: argparse.Namespace, app_settings: Settings) -> int:
    """Seed the SQLite directory (and optionally ChromaDB) from a JSON file."""
    path = Path(args.file)
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        return 1

    with path.open(encoding="utf-8") as fh:
        payload = json.load(fh)

    from localscout.providers.store.sqlite_business_store import SQLiteBusinessStore

    db_path = args.db or app_settings.directory_db_path
    store = SQLiteBusinessStore(db_path=db_path)
    await store.initialize()
    counts = await store.seed(payload)

    print(f"Seeded {db_path}:")
    for table, count in counts.items():
        print(f"  {table:<12} {count}")

    knowledge = _group_knowledge(payload.get("knowledge", []))
    if not knowledge:
        return 0

    from localscout.main import _build_semantic_search

    _log_to_stderr(app_settings)

    semantic = _build_semantic_search(app_settings)
    if semantic is None:
        print("Knowledge documents skipped: semantic search is not configured.")
        return 0

    for city, documents in sorted(knowledge.items()):
        stored = await semantic.upsert_documents(city, documents)
        print(f"  knowledge    {stored} ({city})")
    return 0


async def _ask_once(pipeline: Any, session_id: str, city: str, message: str, as_json: bool) -> None:
    response = await pipeline.handle_turn(session_id, message, city)
    print(_format_json(response) if as_json else _format_text(response))


async def _handle_ask(args: argparse.Namespace, app_settings: Settings) -> int:
    """Run one turn, or an interactive session when no message is given."""
    from localscout.main import _build_all

    _log_to_stderr(app_settings)

    components = _build_all(app_settings)
    await components["business_store"].initialize()

    city = args.city.lower()
    if city not in components["tenants"]:
        configured = ", ".join(sorted(components["tenants"])) or "none"
        print(f"Error: City '{args.city}' is not configured (configured: {configured})", file=sys.stderr)
        return 1

    pipeline = components["pipeline"]
    session_id = args.session or str(uuid4())

    try:
        if args.message:
            await _ask_once(pipeline, session_id, city, " ".join(args.message), args.json)
            return 0

        print(f"localScout ({city}), session {session_id}. Type 'quit' to leave.")
        while True:
            try:
                message = input("> ").strip()
            except EOFError:
                break
            if not message:
                continue
            if message.lower() in _EXIT_WORDS:
                break
            await _ask_once(pipeline, session_id, city, message, args.json)
            print()
    except LocalScoutError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the localScout CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m localscout.cli",
        description="Seed the localScout directory and chat with a city.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # -- seed --
    seed_parser = subparsers.add_parser("seed", help="Load a JSON directory export")
    seed_parser.add_argument("--file", required=True, help="Path to the JSON export")
    seed_parser.add_argument("--db", default="", help="SQLite path (default: DIRECTORY_DB_PATH)")

    # -- ask --
    ask_parser = subparsers.add_parser("ask", help="Ask the assistant about a city")
    ask_parser.add_argument("--city", required=True, help="Tenant city key, e.g. bournemouth")
    ask_parser.add_argument("--session", default="", help="Reuse a session id")
    ask_parser.add_argument("--json", action="store_true", help="Print the raw JSON response")
    ask_parser.add_argument("message", nargs="*", help="Message; omit for an interactive session")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """CLI entry point: parse the subcommand and dispatch to its handler."""
    parser = _build_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = Settings()
    _log_to_stderr(app_settings)

    if args.command == "seed":
        exit_code = asyncio.run(_handle_seed(args, app_settings))
    elif args.command == "ask":
        exit_code = asyncio.run(_handle_ask(args, app_settings))
    else:
        parser.print_help()
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
