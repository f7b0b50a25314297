#!/usr/bin/env python3
"""Play Bagh-Chal in the console against the AI or a friend, with optional logging & replay."""

import argparse
import json
import logging
import sys
import time
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional

from baghchal import Cell, Difficulty, GameMode, MatchController, load_config
from baghchal.config import match_config_from_dict, parse_enum
from baghchal.core import Move, render_board
from baghchal.engine import Evaluator, SearchEngine

COMMANDS = "r,c = place/select/move, 'undo', 'restart', 'q' = quit"


def format_status(controller: MatchController) -> str:
    state = controller.state
    return (
        f"{state.message} | captured {state.goats_captured}/{controller.capture_goal}"
        f" | goats in play {state.goats_on_board} | placed {state.goats_placed}"
    )


def format_board(controller: MatchController) -> str:
    targets = set(controller.selection_targets())
    rows = render_board(controller.state.board).splitlines()
    lines = ["  " + " ".join(str(c) for c in range(len(rows)))]
    for r, row in enumerate(rows):
        cells = ["*" if (r, c) in targets else symbol for c, symbol in enumerate(row)]
        lines.append(f"{r} " + " ".join(cells))
    return "\n".join(lines)


def no_move_notice(controller: MatchController) -> Optional[str]:
    """Message for a side to move that has nothing to play, else ``None``."""
    if controller.state.is_finished or controller.legal_moves():
        return None
    who = "The computer" if not controller.is_human_turn else controller.state.turn.label
    return f"{who} has no legal move."


def parse_position(raw: str) -> Optional[tuple]:
    parts = raw.replace(" ", "").split(",")
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        return None
    return int(parts[0]), int(parts[1])


def move_to_record(move: Move, actor: str, side: Cell, index: int) -> Dict:
    return {
        "move_index": index,
        "actor": actor,
        "side": side.name.lower(),
        "from": list(move.origin) if move.origin is not None else None,
        "to": list(move.target),
    }


def record_to_move(entry: Dict) -> Move:
    origin = tuple(entry["from"]) if entry.get("from") is not None else None
    return Move(origin, tuple(entry["to"]))


def save_log(log: Dict, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(log, ensure_ascii=False, indent=2))
    print(f"Saved log to {path}.")


def replay_logged_game(log_path: Path, *, verbose: bool = True) -> Dict[str, object]:
    data = json.loads(log_path.read_text())
    metadata = data.get("metadata", {})
    controller = MatchController(match_config_from_dict(metadata.get("config", {"mode": "pvp"})))
    moves = data.get("moves", [])
    if verbose:
        print("Replaying game.")
        print(format_board(controller))
    for entry in moves:
        move = record_to_move(entry)
        if not controller.play(move):
            raise ValueError(f"Logged move {entry} is illegal in the replayed position.")
        if verbose:
            print(f"{entry.get('actor', 'unknown')} ({entry.get('side', '?')}): {move}")
            print(format_board(controller))
    state = controller.state
    summary = {
        "winner": state.winner.name.lower() if state.winner is not None else None,
        "moves": len(moves),
        "goats_captured": state.goats_captured,
        "board": state.board.tolist(),
    }
    if verbose:
        print("Replay finished.")
        print(f"Result: {summary['winner'] or 'unfinished'}")
    return summary


def play_interactive(args: argparse.Namespace) -> None:
    app_config = load_config(args.config)
    match_config = app_config.match
    if args.mode is not None:
        match_config = replace(match_config, mode=parse_enum(GameMode, args.mode))
    if args.side is not None:
        match_config = replace(match_config, side=parse_enum(Cell, args.side))
    if args.difficulty is not None:
        match_config = replace(match_config, difficulty=parse_enum(Difficulty, args.difficulty))

    engine = SearchEngine(app_config.search, evaluator=Evaluator(app_config.evaluation))
    controller = MatchController(match_config, engine=engine)
    log_records: List[Dict] = []

    print(f"Commands: {COMMANDS}")
    while True:
        state = controller.state
        print()
        print(format_board(controller))
        print(format_status(controller))

        if state.is_finished:
            break
        notice = no_move_notice(controller)
        if notice is not None:
            print(notice)
            break

        if not controller.is_human_turn:
            time.sleep(match_config.think_delay)
            mover = state.turn
            move = controller.play_ai_turn()
            if move is None:
                break
            print(f"CPU ({mover.label}): {move}")
            log_records.append(move_to_record(move, "ai", mover, len(log_records)))
            continue

        raw = input(f"{state.turn.label} > ").strip().lower()
        if raw in {"q", "quit", "exit"}:
            print("Goodbye.")
            break
        if raw == "undo":
            if controller.undo():
                log_records.pop()
            else:
                print("Undo is not available.")
            continue
        if raw == "restart":
            controller.restart()
            log_records.clear()
            continue

        position = parse_position(raw)
        if position is None:
            print(f"Unrecognised input. {COMMANDS}")
            continue
        mover = state.turn
        if controller.click(position):
            log_records.append(move_to_record(controller.last_move, "human", mover, len(log_records)))

    if args.log_file:
        metadata = {
            "config": {
                "mode": match_config.mode.name.lower(),
                "side": match_config.side.name.lower(),
                "difficulty": match_config.difficulty.name.lower(),
            },
            "winner": controller.winner.name.lower() if controller.winner is not None else None,
        }
        save_log({"metadata": metadata, "moves": log_records}, Path(args.log_file))


def main() -> None:
    parser = argparse.ArgumentParser(description="Play Bagh-Chal in the console.")
    parser.add_argument("--config", help="YAML config file", default=None)
    parser.add_argument("--mode", choices=["ai", "pvp"], default=None)
    parser.add_argument("--side", choices=["goat", "tiger"], default=None)
    parser.add_argument("--difficulty", choices=["easy", "medium", "hard"], default=None)
    parser.add_argument("--log-file", type=str)
    parser.add_argument("--replay-log", type=str, help="Replay a logged game and exit")
    parser.add_argument("--replay-quiet", action="store_true")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.replay_log:
        replay_logged_game(Path(args.replay_log), verbose=not args.replay_quiet)
        return

    play_interactive(args)


if __name__ == "__main__":
    main()
