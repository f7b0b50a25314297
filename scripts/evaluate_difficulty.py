#!/usr/bin/env python3
"""Pit two AI difficulty levels (or the random baseline) against each other."""

import argparse
import json
import logging

from baghchal import Difficulty, load_config
from baghchal.config import parse_enum
from baghchal.engine import EnginePolicy, Policy, RandomPolicy
from baghchal.evaluation import evaluate_policies


def build_policy(name: str, app_config, seed: int) -> Policy:
    if name == "random":
        return RandomPolicy().spawn(seed)
    return EnginePolicy(
        parse_enum(Difficulty, name),
        search_config=app_config.search,
        weights=app_config.evaluation,
    ).spawn(seed)


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--tiger", choices=["random", "easy", "medium", "hard"], default="medium")
    parser.add_argument("--goat", choices=["random", "easy", "medium", "hard"], default="easy")
    parser.add_argument("--episodes", type=int, default=10)
    parser.add_argument("--max-ply", type=int, default=200)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--config", type=str, default=None)
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    app_config = load_config(args.config)
    tiger_policy = build_policy(args.tiger, app_config, args.seed)
    goat_policy = build_policy(args.goat, app_config, args.seed + 1)

    result = evaluate_policies(
        tiger_policy,
        goat_policy,
        episodes=args.episodes,
        max_ply=args.max_ply,
    )

    output = {
        "tiger": args.tiger,
        "goat": args.goat,
        "games": result.games_played,
        "tiger_wins": result.tiger_wins,
        "goat_wins": result.goat_wins,
        "unfinished": result.unfinished,
        "average_length": result.average_length,
        "tiger_winrate": result.winrate_tiger(),
        "goat_winrate": result.winrate_goat(),
    }
    print(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
