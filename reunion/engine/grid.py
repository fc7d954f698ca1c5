"""Grid topology, creature placement table and the generation buffer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from ..core.constants import (
    DEFAULT_COLS,
    DEFAULT_CREATURE_STARTS,
    DEFAULT_DISPLAY_COLS,
    DEFAULT_DISPLAY_ROWS,
    DEFAULT_HOLES,
    DEFAULT_ROWS,
    KING_STEPS,
    MIN_SLOT_LENGTH,
    Bounds,
    Cell,
    CellKind,
    Creature,
    Direction,
    is_creature_symbol,
)
from ..core.exceptions import SlotDerivationError, ValidationError
from ..core.models import Segment, Slot, SolutionGrid
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

CreaturePlacement = Tuple[Cell, Cell]

# (fox cell, hedgehog cell) pairs for the default 7x5 board. Each pair is
# 8-adjacent, off the holes, and leaves every display row and column as a
# single run of at least three letters. Diagonal pairs always strand a
# one-letter run on this board, so only corner pairs qualify.
CREATURE_CONFIGS: Tuple[CreaturePlacement, ...] = (
    ((0, 0), (1, 0)),
    ((5, 0), (6, 0)),
    ((0, 4), (1, 4)),
    ((5, 4), (6, 4)),
    ((0, 0), (0, 1)),
    ((0, 3), (0, 4)),
    ((6, 0), (6, 1)),
    ((6, 3), (6, 4)),
)


@dataclass
class GridConfig:
    """Static board topology. Holes and creature cells are configuration, not derived."""

    rows: int = DEFAULT_ROWS
    cols: int = DEFAULT_COLS
    holes: FrozenSet[Cell] = field(default_factory=lambda: frozenset(DEFAULT_HOLES))
    creature_starts: Dict[Creature, Cell] = field(
        default_factory=lambda: dict(DEFAULT_CREATURE_STARTS)
    )
    display_rows: Tuple[int, ...] = DEFAULT_DISPLAY_ROWS
    display_cols: Tuple[int, ...] = DEFAULT_DISPLAY_COLS
    creature_configs: Tuple[CreaturePlacement, ...] = CREATURE_CONFIGS
    min_slot_length: int = MIN_SLOT_LENGTH

    def __post_init__(self) -> None:
        self.holes = frozenset(self.holes)

    def bounds(self) -> Bounds:
        return Bounds(rows=self.rows, cols=self.cols)

    def is_hole(self, row: int, col: int) -> bool:
        return (row, col) in self.holes

    def playable_cells(self) -> List[Cell]:
        """Non-hole cells in reading order."""
        return [
            (r, c)
            for r in range(self.rows)
            for c in range(self.cols)
            if (r, c) not in self.holes
        ]

    def display_segments(self) -> List[Segment]:
        segments = [
            Segment(
                direction=Direction.ROW,
                index=r,
                cells=tuple((r, c) for c in range(self.cols) if (r, c) not in self.holes),
            )
            for r in self.display_rows
        ]
        segments.extend(
            Segment(
                direction=Direction.COLUMN,
                index=c,
                cells=tuple((r, c) for r in range(self.rows) if (r, c) not in self.holes),
            )
            for c in self.display_cols
        )
        return segments


def are_adjacent(a: Cell, b: Cell) -> bool:
    """Chebyshev distance exactly one (8-directional adjacency)."""
    return (a[0] - b[0], a[1] - b[1]) in KING_STEPS


class FillGrid:
    """Owned, mutable grid buffer threaded through the backtracking fill."""

    def __init__(self, config: GridConfig) -> None:
        self.config = config
        self.bounds = config.bounds()
        self.cells: List[List[Optional[str]]] = [
            [None for _ in range(self.bounds.cols)] for _ in range(self.bounds.rows)
        ]

    @classmethod
    def from_solution(cls, config: GridConfig, solution: SolutionGrid) -> "FillGrid":
        grid = cls(config)
        if solution.bounds != grid.bounds:
            raise ValidationError(
                f"Solution is {solution.bounds.rows}x{solution.bounds.cols}, "
                f"board is {grid.bounds.rows}x{grid.bounds.cols}"
            )
        for (row, col), char in solution.iter_cells():
            grid.cells[row][col] = char
        return grid

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def kind(self, row: int, col: int) -> CellKind:
        if self.config.is_hole(row, col):
            return CellKind.HOLE
        if is_creature_symbol(self.cells[row][col]):
            return CellKind.CREATURE
        return CellKind.LETTER

    def is_fillable(self, row: int, col: int) -> bool:
        return self.kind(row, col) == CellKind.LETTER

    def pattern(self, slot: Slot) -> List[Optional[str]]:
        return [self.cells[r][c] for r, c in slot.cells]

    def empty_cells(self) -> List[Cell]:
        return [
            (r, c)
            for r, c in self.config.playable_cells()
            if self.cells[r][c] is None
        ]

    def is_complete(self) -> bool:
        return not self.empty_cells()

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def place_creatures(self, placement: CreaturePlacement) -> None:
        for creature, (row, col) in zip((Creature.FOX, Creature.HEDGEHOG), placement):
            if not self.bounds.contains(row, col) or self.config.is_hole(row, col):
                raise SlotDerivationError(f"Creature cell {(row, col)} is not on the board")
            self.cells[row][col] = creature.symbol

    def write(self, slot: Slot, word: str) -> List[Optional[str]]:
        """Write ``word`` into ``slot`` and return the prior cell contents."""
        backup = self.pattern(slot)
        for (row, col), letter in zip(slot.cells, word):
            self.cells[row][col] = letter
        return backup

    def restore(self, slot: Slot, backup: Sequence[Optional[str]]) -> None:
        for (row, col), previous in zip(slot.cells, backup):
            self.cells[row][col] = previous

    def freeze(self) -> SolutionGrid:
        missing = self.empty_cells()
        if missing:
            raise ValidationError(f"Cannot freeze grid with unfilled cells: {missing}")
        return SolutionGrid(cells=tuple(tuple(row) for row in self.cells))

    def to_text(self, hole: str = "#", blank: str = ".") -> str:
        lines = []
        for r, row in enumerate(self.cells):
            lines.append(
                "".join(
                    hole if self.config.is_hole(r, c) else (ch or blank)
                    for c, ch in enumerate(row)
                )
            )
        return "\n".join(lines)


# ----------------------------------------------------------------------
# Slot derivation
# ----------------------------------------------------------------------
def _runs(cells: Iterable[Cell], is_open) -> List[List[Cell]]:
    runs: List[List[Cell]] = []
    current: List[Cell] = []
    for cell in cells:
        if is_open(*cell):
            current.append(cell)
        elif current:
            runs.append(current)
            current = []
    if current:
        runs.append(current)
    return runs


def derive_slots(grid: FillGrid) -> List[Slot]:
    """Rows left-to-right, then columns top-to-bottom; runs shorter than the minimum are dropped."""

    bounds = grid.bounds
    minimum = grid.config.min_slot_length
    slots: List[Slot] = []
    for r in range(bounds.rows):
        for run in _runs(((r, c) for c in range(bounds.cols)), grid.is_fillable):
            if len(run) >= minimum:
                slots.append(Slot(start_row=r, start_col=run[0][1], direction=Direction.ROW, length=len(run)))
    for c in range(bounds.cols):
        for run in _runs(((r, c) for r in range(bounds.rows)), grid.is_fillable):
            if len(run) >= minimum:
                slots.append(Slot(start_row=run[0][0], start_col=c, direction=Direction.COLUMN, length=len(run)))
    return slots


def uncovered_cells(grid: FillGrid, slots: Sequence[Slot]) -> List[Cell]:
    """Fillable cells that no slot reaches; word matching would leave them blank."""
    covered = {cell for slot in slots for cell in slot.cells}
    return [
        (r, c)
        for r, c in grid.config.playable_cells()
        if grid.is_fillable(r, c) and (r, c) not in covered
    ]


def is_valid_creature_config(config: GridConfig, placement: CreaturePlacement) -> bool:
    """Check a table entry: on-board, adjacent, and every display line stays one run of >= 3."""

    first, second = placement
    bounds = config.bounds()
    for row, col in placement:
        if not bounds.contains(row, col) or config.is_hole(row, col):
            return False
    if not are_adjacent(first, second):
        return False

    grid = FillGrid(config)
    grid.place_creatures(placement)
    if uncovered_cells(grid, derive_slots(grid)):
        return False
    for segment in config.display_segments():
        runs = _runs(segment.cells, grid.is_fillable)
        if len(runs) != 1 or len(runs[0]) < config.min_slot_length:
            return False
    return True
