"""Command-line interface for browsing, editing and describing players."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import Any, Sequence

from pydantic import ValidationError

from scoutbook.config import Settings
from scoutbook.errors import ScoutbookError
from scoutbook.models import Player, PlayerPatch
from scoutbook.services import SORT_KEYS, Services, build_services, sort_players


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Browse and edit baseball player stats")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (e.g., INFO, DEBUG)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List all players")
    list_parser.add_argument("--sort", choices=sorted(SORT_KEYS), default=None, help="Sort key")
    list_parser.add_argument("--direction", choices=("asc", "desc"), default="asc", help="Sort direction")

    show_parser = subparsers.add_parser("show", help="Show one player as JSON")
    show_parser.add_argument("player_id")

    edit_parser = subparsers.add_parser("edit", help="Edit player fields")
    edit_parser.add_argument("player_id")
    edit_parser.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="FIELD=VALUE",
        help="Field assignment (e.g., homeRuns=715); repeatable",
    )

    describe_parser = subparsers.add_parser("describe", help="Get or generate a scouting report")
    describe_parser.add_argument("player_id")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser.parse_args(argv)


def _parse_assignments(assignments: Sequence[str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for item in assignments:
        if "=" not in item:
            raise SystemExit(f"Invalid assignment '{item}', expected FIELD=VALUE")
        key, value = item.split("=", 1)
        values[key.strip()] = value.strip()
    if not values:
        raise SystemExit("edit requires at least one --set FIELD=VALUE")
    return values


def _dump(player: Player) -> str:
    return json.dumps(player.model_dump(by_alias=True), indent=2)


def _format_row(player: Player) -> str:
    return (
        f"{player.id:<32} {player.name:<24} {player.position:<6} "
        f"G={player.games:<5} H={player.hits:<5} HR={player.home_runs:<4} "
        f"AVG={player.avg:.3f} OPS={player.ops:.3f}"
    )


async def _run(args: argparse.Namespace, services: Services) -> None:
    if args.command == "list":
        players = await services.players.get_all()
        if args.sort:
            players = sort_players(players, args.sort, args.direction)
        for player in players:
            print(_format_row(player))
        print(f"{len(players)} players")
    elif args.command == "show":
        player = await services.players.get_by_id(args.player_id)
        if player is None:
            raise SystemExit(f"player {args.player_id} not found")
        print(_dump(player))
    elif args.command == "edit":
        try:
            patch = PlayerPatch.model_validate(_parse_assignments(args.assignments))
        except ValidationError as exc:
            raise SystemExit(f"Validation failed: {exc}") from exc
        print(_dump(await services.players.update(args.player_id, patch)))
    elif args.command == "describe":
        result = await services.descriptions.get_or_generate(args.player_id)
        suffix = " (cached)" if result.cached else ""
        print(f"{result.description}{suffix}")


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    settings = Settings.from_env()

    if args.command == "serve":
        import uvicorn

        from scoutbook.api import create_app

        uvicorn.run(create_app(settings), host=args.host, port=args.port)
        return

    services = build_services(settings)
    try:
        asyncio.run(_run(args, services))
    except ScoutbookError as exc:
        raise SystemExit(str(exc)) from exc


if __name__ == "__main__":
    main()
