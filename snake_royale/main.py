"""Snake Royale entry point.

Usage:
    Local game:        python -m snake_royale.main
    Three snakes:      python -m snake_royale.main --players 3
    With modifiers:    python -m snake_royale.main --mods PORTALS,FAST
    Denser map:        python -m snake_royale.main --obstacles 0.1
    Fixed first seed:  python -m snake_royale.main --seed 1234
"""

from __future__ import annotations

import argparse
import logging
import uuid
from datetime import datetime, timedelta, timezone

import pygame

from snake_royale.config import (
    BOARD_HEIGHT,
    CELL_RENDER_SIZE,
    COLOR_OPTIONS,
    OBSTACLE_RATIO,
    SCREEN_WIDTH,
    STATUS_BAR_HEIGHT,
)
from snake_royale.game import Game
from snake_royale.networking.bus import LoopbackHub
from snake_royale.results import InMemoryResultsStore
from snake_royale.session.coordinator import SessionCoordinator
from snake_royale.session.election import format_iso
from snake_royale.simulation.state import Modifier, PlayerInfo


def _modifiers(text: str) -> Modifier:
    try:
        return Modifier.parse(text)
    except KeyError as e:
        raise argparse.ArgumentTypeError(f"unknown modifier {e}") from None


def _ratio(text: str) -> float:
    value = float(text)
    if not 0.0 <= value <= 1.0:
        raise argparse.ArgumentTypeError(f"ratio must be between 0 and 1, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Snake Royale — host-stepped multiplayer snake")
    parser.add_argument(
        "--players", type=int, default=2, metavar="N",
        help="Snakes in the round, including you (default: 2)",
    )
    parser.add_argument(
        "--mods", type=_modifiers, default=Modifier.NONE, metavar="LIST",
        help="Comma separated modifiers: PORTALS, FAST, DOUBLE, TOXIC",
    )
    parser.add_argument(
        "--obstacles", type=_ratio, default=OBSTACLE_RATIO, metavar="RATIO",
        help=f"Fraction of cells scattered with obstacles, 0 to 1 (default: {OBSTACLE_RATIO})",
    )
    parser.add_argument("--name", default="anon", help="Your display name")
    parser.add_argument("--color", default=COLOR_OPTIONS[0], help="Your snake color (#rrggbb)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the first round")
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--fullscreen", action="store_true",
        help="Start in fullscreen mode",
    )
    return parser


def main() -> None:
    args = build_parser().parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    pygame.init()
    if args.fullscreen:
        screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
    else:
        height = BOARD_HEIGHT * CELL_RENDER_SIZE + STATUS_BAR_HEIGHT * 2
        screen = pygame.display.set_mode((SCREEN_WIDTH, height))
    pygame.display.set_caption("Snake Royale")

    _run_local(screen, args)

    pygame.quit()


def _run_local(screen: pygame.Surface, args: argparse.Namespace) -> None:
    """You plus idle peers on a LoopbackHub. You join first, so you host."""
    hub = LoopbackHub()
    results = InMemoryResultsStore()
    joined = datetime.now(timezone.utc)

    me = PlayerInfo(uuid.uuid4().hex, args.name.strip() or "anon", args.color)
    session = SessionCoordinator(
        hub.connect(), me, results=results, obstacle_ratio=args.obstacles,
    )
    session.join(format_iso(joined))

    bots: list[SessionCoordinator] = []
    for i in range(1, max(1, args.players)):
        color = COLOR_OPTIONS[i % len(COLOR_OPTIONS)]
        bot = SessionCoordinator(hub.connect(), PlayerInfo(f"bot-{i}", f"bot {i}", color))
        bot.join(format_iso(joined + timedelta(milliseconds=i)))
        bots.append(bot)

    game = Game(screen, session, bots=bots, modifiers=args.mods, seed=args.seed, results=results)
    game.run()


if __name__ == "__main__":
    main()
