"""Per-tile feedback and the win condition.

Feedback works like a Wordle guess scored once per display segment: each
segment's solution letters form a budget, exact tiles spend from it first,
and the remaining budget is handed out as "present" in reading order.
"""

from __future__ import annotations

from collections import Counter
from typing import AbstractSet, Dict, Iterable, Mapping, Optional, Set

from ..core.constants import Cell, is_creature_symbol
from ..core.models import Feedback, Segment, SolutionGrid, Tile
from .grid import GridConfig, are_adjacent


def _solution_char(solution: SolutionGrid, cell: Cell) -> Optional[str]:
    row, col = cell
    if not solution.bounds.contains(row, col):
        return None
    return solution.char_at(row, col)


def is_exact(tile: Tile, solution: SolutionGrid) -> bool:
    if tile.is_creature:
        return False
    return _solution_char(solution, tile.position) == tile.char


def evaluate(
    tiles: Iterable[Tile],
    solution: SolutionGrid,
    grid_config: Optional[GridConfig] = None,
) -> Feedback:
    """Return the exact and present tile ids for the current layout."""

    config = grid_config or GridConfig()
    tiles = list(tiles)
    exact: Set[str] = {tile.id for tile in tiles if is_exact(tile, solution)}
    by_cell: Dict[Cell, Tile] = {tile.position: tile for tile in tiles}
    present: Set[str] = set()

    for segment in config.display_segments():
        present |= segment_present(segment, by_cell, exact, solution)

    return Feedback(exact=frozenset(exact), present=frozenset(present - exact))


def segment_budget(segment: Segment, solution: SolutionGrid) -> Counter:
    """Letter counts of the segment's solution word, creatures excluded."""

    budget: Counter = Counter()
    for cell in segment.cells:
        char = _solution_char(solution, cell)
        if char is not None and not is_creature_symbol(char):
            budget[char] += 1
    return budget


def segment_present(
    segment: Segment,
    by_cell: Mapping[Cell, Tile],
    exact: AbstractSet[str],
    solution: SolutionGrid,
) -> Set[str]:
    """Ids this segment marks present once its exact tiles have spent their budget."""

    budget = segment_budget(segment, solution)
    # segment.cells is already in reading order
    occupants = [by_cell[cell] for cell in segment.cells if cell in by_cell]
    for tile in occupants:
        if tile.id in exact and budget[tile.char] > 0:
            budget[tile.char] -= 1

    present: Set[str] = set()
    for tile in occupants:
        if tile.is_creature or tile.id in exact:
            continue
        if budget[tile.char] > 0:
            present.add(tile.id)
            budget[tile.char] -= 1
    return present


def check_win(tiles: Iterable[Tile], solution: SolutionGrid) -> bool:
    """All letters exact and the two creatures 8-adjacent."""

    creatures = []
    for tile in tiles:
        if tile.is_creature:
            creatures.append(tile)
        elif not is_exact(tile, solution):
            return False
    if len(creatures) != 2:
        return False
    return are_adjacent(creatures[0].position, creatures[1].position)


def calculate_stars(moves: int) -> int:
    if moves < 20:
        return 3
    if moves < 30:
        return 2
    return 1
