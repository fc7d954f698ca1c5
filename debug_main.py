"""Diagnostics for generation failures.

Usage in a Python console::

    import debug_main
    state = debug_main.prepare_state(dictionary="words.txt")
    debug_main.step_bounded(state)
    debug_main.step_feasibility(state)
    debug_main.print_summary(state)

Call :func:`run_debug` for a one-liner. For every creature placement in the
table it runs the bounded generator several times and then asks CP-SAT
whether a fill exists at all, to tell a tight candidate cap apart from a
lexicon that simply cannot fill the board.
"""

from __future__ import annotations

import argparse
import logging
import time
from typing import Any, Dict, List, Optional

from reunion.core.exceptions import ReunionError
from reunion.data.lexicon import load_lexicon
from reunion.engine.feasibility import FeasibilityReport, check_placement
from reunion.engine.generator import GeneratorConfig, PuzzleGenerator
from reunion.utils.logger import configure_logging
from reunion.utils.pretty import format_solution

DEFAULT_DEBUG_ARGS: Dict[str, Any] = {
    "dictionary": None,
    "seed": 7,
    "max_candidates": 50,
    "runs_per_placement": 5,
    "cpsat_timeout": 10.0,
}

LOGGER = logging.getLogger(__name__)


def prepare_state(**overrides: Any) -> Dict[str, Any]:
    """Return a mutable state dictionary used by the step helpers."""

    args = {**DEFAULT_DEBUG_ARGS, **overrides}
    configure_logging(logging.INFO, solver_level=logging.WARNING)
    lexicon = load_lexicon(args["dictionary"])
    LOGGER.info("Lexicon lengths: %s", {n: len(lexicon.words_of_length(n)) for n in lexicon.lengths()})
    config = GeneratorConfig(seed=args["seed"], max_candidates=args["max_candidates"])
    return {
        "args": args,
        "lexicon": lexicon,
        "config": config,
        "bounded": {},
        "feasibility": {},
    }


def step_bounded(state: Dict[str, Any]) -> None:
    """Run the bounded generator ``runs_per_placement`` times per placement."""

    generator = PuzzleGenerator(state["lexicon"], state["config"])
    for placement in state["config"].grid.creature_configs:
        successes = 0
        elapsed: List[float] = []
        for _ in range(state["args"]["runs_per_placement"]):
            started = time.perf_counter()
            try:
                generator.generate_with(placement)
                successes += 1
            except ReunionError as exc:
                LOGGER.debug("Placement %s failed: %s", placement, exc)
            elapsed.append(time.perf_counter() - started)
        state["bounded"][placement] = {
            "successes": successes,
            "runs": len(elapsed),
            "avg_seconds": sum(elapsed) / len(elapsed) if elapsed else 0.0,
        }
        LOGGER.info("Placement %s: %d/%d bounded fills", placement, successes, len(elapsed))


def step_feasibility(state: Dict[str, Any]) -> None:
    """Ask CP-SAT whether each placement can be filled at all."""

    for placement in state["config"].grid.creature_configs:
        report = check_placement(
            state["lexicon"],
            placement,
            state["config"].grid,
            timeout=state["args"]["cpsat_timeout"],
        )
        state["feasibility"][placement] = report


def print_summary(state: Dict[str, Any]) -> None:
    print(f"{'placement':<22} {'bounded':>9} {'avg s':>7}  cp-sat")
    for placement in state["config"].grid.creature_configs:
        bounded = state["bounded"].get(placement)
        report: Optional[FeasibilityReport] = state["feasibility"].get(placement)
        bounded_text = f"{bounded['successes']}/{bounded['runs']}" if bounded else "-"
        avg_text = f"{bounded['avg_seconds']:.3f}" if bounded else "-"
        status = report.status if report else "-"
        print(f"{str(placement):<22} {bounded_text:>9} {avg_text:>7}  {status}")

    for report in state["feasibility"].values():
        if report.solution is not None:
            print()
            print(f"Example CP-SAT fill for {report.placement}:")
            print(format_solution(report.solution))
            break


def run_debug(**overrides: Any) -> Dict[str, Any]:
    state = prepare_state(**overrides)
    if state["lexicon"].is_empty:
        LOGGER.error("Lexicon is empty; nothing to diagnose")
        return state
    step_bounded(state)
    step_feasibility(state)
    print_summary(state)
    return state


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Diagnose puzzle generation per creature placement")
    parser.add_argument("--dictionary", type=str, default=None, help="Word list path or URL")
    parser.add_argument("--seed", type=int, default=DEFAULT_DEBUG_ARGS["seed"])
    parser.add_argument("--max-candidates", type=int, default=DEFAULT_DEBUG_ARGS["max_candidates"])
    parser.add_argument("--runs", type=int, default=DEFAULT_DEBUG_ARGS["runs_per_placement"])
    parser.add_argument("--timeout", type=float, default=DEFAULT_DEBUG_ARGS["cpsat_timeout"])
    args = parser.parse_args(argv)
    run_debug(
        dictionary=args.dictionary,
        seed=args.seed,
        max_candidates=args.max_candidates,
        runs_per_placement=args.runs,
        cpsat_timeout=args.timeout,
    )


if __name__ == "__main__":  # pragma: no cover
    main()
