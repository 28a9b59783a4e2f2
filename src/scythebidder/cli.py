from __future__ import annotations

import argparse
import json
import logging
import random
import secrets
import sys
from collections.abc import Sequence

from .core import settings
from .core.auction import setup
from .core.catalog import CATALOGS, catalog_for
from .core.errors import AuctionError


def _players(raw: str) -> int | list[str]:
    """Accept either a seat count ("4") or comma-separated names."""

    if raw.strip().isdigit():
        return int(raw)
    return [name.strip() for name in raw.split(",") if name.strip()]


def _deal(args: argparse.Namespace) -> int:
    catalog = catalog_for(args.variant or settings.current().variant)
    players = args.players
    names = None if isinstance(players, int) else players
    count = players if isinstance(players, int) else len(players)
    catalog.validate_players(count)
    seed = args.seed if args.seed is not None else secrets.SystemRandom().getrandbits(32)
    state = setup(catalog.factions, catalog.mats, count, random.Random(seed), seat_names=names)
    payload = {
        "variant": catalog.name,
        "seed": seed,
        "combinations": [{"faction": c.faction.value, "mat": c.mat.value} for c in state.combinations],
        "play_order": [state.seats[idx].name for idx in state.play_order],
    }
    print(json.dumps(payload, indent=2))
    return 0


def _serve(args: argparse.Namespace) -> int:
    from .web.app import main as run_server

    run_server(host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="scythebidder", description="Scythe faction/player-mat auction helper")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    deal = sub.add_parser("deal", help="Generate combinations and a bidding order as JSON")
    deal.add_argument("--players", type=_players, default=2, help="Seat count or comma-separated player names")
    # If omitted, runs with a random seed. Pass an int to reproduce a table.
    deal.add_argument("--seed", type=int, default=None, help="RNG seed (random if omitted)")
    deal.add_argument("--variant", choices=sorted(CATALOGS), default=None, help="Catalog to draw from")
    deal.set_defaults(handler=_deal)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None, help="Bind address (default: $BIND or 0.0.0.0)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: $PORT or 8000)")
    serve.set_defaults(handler=_serve)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    try:
        return args.handler(args)
    except AuctionError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
