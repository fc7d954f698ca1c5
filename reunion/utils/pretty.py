"""Plain-text rendering for solutions, boards and statistics."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Dict, List, Optional

from ..core.constants import Cell, is_creature_symbol

if TYPE_CHECKING:
    from ..core.models import Feedback, SolutionGrid
    from ..engine.session import GameSession
    from ..engine.session_store import GameStats


HOLE = "##"
EMPTY = " ."
# Exact letters are bracketed, present ones get a '?'
MARKERS = {"exact": "[{}]", "present": " {}?", "absent": " {} "}


def _header(width: int) -> List[str]:
    return ["    " + " ".join(f"{c:>3}" for c in range(width)), "    " + "-" * (4 * width - 1)]


def format_solution(solution: "SolutionGrid") -> str:
    width = solution.bounds.cols
    lines = _header(width)
    for r, row in enumerate(solution.cells):
        cells = []
        for char in row:
            if char is None:
                cells.append(f"{HOLE:>3}")
            elif is_creature_symbol(char):
                cells.append(f" {char}")
            else:
                cells.append(f"{char:>3}")
        lines.append(f"{r:>2} | " + " ".join(cells))
    return "\n".join(lines)


def format_board(session: "GameSession", feedback: Optional["Feedback"] = None) -> str:
    """Render current tile positions with their feedback status."""

    feedback = feedback or session.feedback()
    bounds = session.solution.bounds
    by_cell: Dict[Cell, str] = {}
    for tile in session.tiles:
        if tile.is_creature:
            by_cell[tile.position] = f" {tile.char}"
        else:
            by_cell[tile.position] = MARKERS[feedback.status(tile.id)].format(tile.char)

    lines = _header(bounds.cols)
    for r in range(bounds.rows):
        cells = []
        for c in range(bounds.cols):
            if session.solution.char_at(r, c) is None:
                cells.append(f"{HOLE:>3}")
            else:
                cells.append(by_cell.get((r, c), f"{EMPTY:>3}"))
        lines.append(f"{r:>2} | " + " ".join(cells))
    lines.append("")
    lines.append(f"Moves: {session.move_count}{'  (solved)' if session.won else ''}")
    return "\n".join(lines)


def print_board(session: "GameSession", *, stream=None) -> None:
    stream = stream or sys.stdout
    print(format_board(session), file=stream)


def print_stats(stats: "GameStats", *, stream=None) -> None:
    stream = stream or sys.stdout
    print("--- Stats ---", file=stream)
    print(f"  Solved:     {stats.solved}", file=stream)
    print(f"  Avg moves:  {stats.average_moves:.1f}", file=stream)
    print(f"  Streak:     {stats.streak}", file=stream)
