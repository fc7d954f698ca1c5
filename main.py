"""CLI entrypoint for the Reunion word-fill puzzle."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from reunion.core.constants import DEFAULT_STATE_KEY, GENERATION_ATTEMPTS, MAX_CANDIDATES
from reunion.core.exceptions import ReunionError
from reunion.data.lexicon import load_lexicon
from reunion.engine.feedback import calculate_stars
from reunion.engine.generator import GeneratorConfig, PuzzleGenerator
from reunion.engine.session_store import (
    DEFAULT_STORE_DIR,
    SessionStore,
    StatsStore,
    load_session,
    resume_or_create,
)
from reunion.utils.logger import configure_logging
from reunion.utils.pretty import format_solution, print_board, print_stats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate and play Reunion word-fill puzzles",
    )
    parser.add_argument(
        "--dictionary",
        type=str,
        default=None,
        help="Word list path or http(s) URL (default: $REUNION_LEXICON_URL or the google-10000 list)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument(
        "--max-candidates",
        type=int,
        default=MAX_CANDIDATES,
        help="Candidates examined per slot after shuffling",
    )
    parser.add_argument(
        "--attempts",
        type=int,
        default=GENERATION_ATTEMPTS,
        help="Independent generation attempts before giving up",
    )
    parser.add_argument(
        "--state-dir",
        type=Path,
        default=DEFAULT_STORE_DIR,
        help="Directory holding the saved session and stats",
    )
    parser.add_argument("--state-key", type=str, default=DEFAULT_STATE_KEY, help="Saved session name")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Print a solution grid as JSON")
    gen.add_argument("--output", type=Path, help="Optional path to JSON output")

    sub.add_parser("new", help="Start a new saved game")
    sub.add_parser("show", help="Show the saved game")

    move = sub.add_parser("move", help="Move a tile in the saved game")
    move.add_argument("tile_id", help="Tile id, e.g. tile-2-3, fox or hedgehog")
    move.add_argument("row", type=int)
    move.add_argument("col", type=int)

    sub.add_parser("stats", help="Show win statistics")
    return parser


def _generator_config(args: argparse.Namespace) -> GeneratorConfig:
    return GeneratorConfig(
        seed=args.seed,
        max_candidates=args.max_candidates,
        retry_limit=args.attempts,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.WARNING)
    configure_logging(level)

    store = SessionStore(args.state_dir)
    stats_store = StatsStore(args.state_dir / "reunion_stats.json")
    config = _generator_config(args)

    if args.command == "stats":
        print_stats(stats_store.snapshot())
        return 0

    if args.command in ("show", "move"):
        session = load_session(store, args.state_key, config.grid)
        if session is None:
            print("No saved game. Run 'new' first.", file=sys.stderr)
            return 1
        if args.command == "move":
            result = session.move(args.tile_id, args.row, args.col, recorder=stats_store)
            if not result.accepted:
                print(f"Invalid move ({result.reason.value})", file=sys.stderr)
            else:
                store.save(session.to_jsonable(), args.state_key)
        print_board(session)
        if session.won:
            stars = calculate_stars(session.move_count)
            print(f"Solved! {'*' * stars}{'.' * (3 - stars)}")
        return 0

    lexicon = load_lexicon(args.dictionary)

    if args.command == "new":
        session = resume_or_create(store, lexicon, config, key=args.state_key, fresh=True)
        if session is None:
            print("Cannot build a puzzle, check connectivity.", file=sys.stderr)
            return 1
        print_board(session)
        return 0

    try:
        solution = PuzzleGenerator(lexicon, config).generate()
    except ReunionError as exc:
        message = getattr(exc, "user_message", str(exc))
        print(message, file=sys.stderr)
        return 1

    payload = {"seed": args.seed, "grid": solution.to_jsonable(), "rows": solution.rows_as_text()}
    output_text = json.dumps(payload, ensure_ascii=False, indent=2)
    if args.output:
        args.output.write_text(output_text, encoding="utf-8")
        print(format_solution(solution))
    else:
        print(output_text)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
