"""
Command-line interface for running headless Catch Five games.

Usage examples (after installing in editable mode):

    python -m catchfive.cli simulate --games 20 --seed 7 --validate
    python -m catchfive.cli simulate --config table.json --log-level DEBUG
"""
from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from .config import GameConfig, load_config
from .simulate import run_game


def _add_simulate_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "simulate",
        help="Play games with four CPU seats and report the results.",
    )
    parser.add_argument(
        "--games",
        type=int,
        default=1,
        help="Number of games to play.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Base random seed; game i uses seed + i.",
    )
    parser.add_argument(
        "--target-score",
        type=int,
        default=None,
        help="Points needed to win (overrides the config file).",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON game config produced by save_config.",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Check card conservation after every transition.",
    )
    parser.set_defaults(func=_cmd_simulate)


def _cmd_simulate(args: argparse.Namespace) -> None:
    cfg = load_config(args.config) if args.config else GameConfig()
    if args.target_score is not None:
        cfg.target_score = args.target_score
    cfg.validate()
    base_seed = args.seed if args.seed is not None else cfg.seed

    wins: dict[str, int] = {t: 0 for t in ("team1", "team2")}
    for i in range(args.games):
        seed = base_seed + i if base_seed is not None else None
        result = run_game(config=cfg, seed=seed, validate=args.validate)
        if result.winner_team_id is not None:
            wins[result.winner_team_id] = wins.get(result.winner_team_id, 0) + 1
        print(
            f"[game {i + 1}/{args.games}] "
            f"winner={result.winner_team_id} "
            f"scores={result.scores} "
            f"rounds={result.num_rounds} "
            f"sets={result.sets} "
            f"max_tension={result.max_tension:.3f}",
            flush=True,
        )
    print(f"Wins: {wins}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Catch Five rules engine tools.")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for the engine.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_simulate_parser(subparsers)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args.func(args)


if __name__ == "__main__":
    main()
