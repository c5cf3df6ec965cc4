"""Command-line tools for Snake Coach."""

from __future__ import annotations

import argparse
import logging
import sys

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snake-coach",
        description="Snake Coach headless simulation and config tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Play a seeded headless game and print the coach's hints.",
    )
    sim_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file.",
    )
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument("--max-ticks", type=int, default=500)
    sim_p.add_argument(
        "--turn-prob", type=float, default=0.2,
        help="Chance per tick of requesting a random turn.",
    )
    sim_p.add_argument(
        "--high-score-file", type=str, default=None,
        help="JSON file to read and update the high score in.",
    )

    # --- init-config ---
    init_p = sub.add_parser(
        "init-config", help="Write the default config to a JSON file.",
    )
    init_p.add_argument("output", help="Destination path.")

    return parser


def _run_simulate(args: argparse.Namespace) -> int:
    import numpy as np

    from snake_coach.config import GameConfig
    from snake_coach.engine import GameEngine
    from snake_coach.persistence import JsonHighScoreStore, MemoryHighScoreStore
    from snake_coach.snake import Direction

    config = GameConfig.load(args.config) if args.config else GameConfig()
    store = (
        JsonHighScoreStore(args.high_score_file)
        if args.high_score_file else MemoryHighScoreStore()
    )

    # The coach's cooldown runs on game time so a headless run behaves
    # like one played at the configured pace.
    elapsed_ms = 0.0

    def clock() -> float:
        return elapsed_ms

    hints: list[tuple[int, str, str]] = []
    engine = GameEngine(config=config, seed=args.seed, store=store, clock=clock)
    engine.hint_sink = lambda h: hints.append(
        (engine.session.ticks, h.category.value, h.text),
    )
    policy_rng = np.random.default_rng(args.seed)
    directions = list(Direction)

    engine.start()
    for _ in range(args.max_ticks):
        if policy_rng.random() < args.turn_prob:
            engine.set_direction(directions[int(policy_rng.integers(len(directions)))])
        engine.tick()
        elapsed_ms += engine.tick_interval_ms
        if engine.game_over:
            break

    for tick, category, text in hints:
        print(f"[{tick:>4}] {category:<7} {text}")  # noqa: T201
    cause = engine.session.cause.value if engine.session.cause else "running"
    print(  # noqa: T201
        f"ticks={engine.session.ticks} score={engine.score} "
        f"high_score={engine.high_score} speed_level={engine.speed_level} "
        f"end={cause}"
    )
    return 0


def _run_init_config(args: argparse.Namespace) -> int:
    from snake_coach.config import GameConfig

    GameConfig().save(args.output)
    print(f"Wrote default config to {args.output}")  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``snake-coach`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "simulate": _run_simulate,
        "init-config": _run_init_config,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
