"""Data models shared by the generator, the feedback engine and the session."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterator, List, Optional, Sequence, Tuple

from .constants import Bounds, Cell, Direction, TileKind, is_creature_symbol
from .exceptions import CorruptedStateError


@dataclass
class Slot:
    """A maximal fillable run used during generation."""

    start_row: int
    start_col: int
    direction: Direction
    length: int
    _cells: Optional[List[Cell]] = field(default=None, repr=False, compare=False)

    @property
    def id(self) -> str:
        prefix = "ROW" if self.direction == Direction.ROW else "COL"
        return f"{prefix}_{self.start_row}_{self.start_col}"

    @property
    def cells(self) -> List[Cell]:
        if self._cells is None:
            if self.direction == Direction.ROW:
                self._cells = [(self.start_row, self.start_col + i) for i in range(self.length)]
            else:
                self._cells = [(self.start_row + i, self.start_col) for i in range(self.length)]
        return self._cells


@dataclass(frozen=True)
class Segment:
    """A full display row or column, holes skipped, in reading order."""

    direction: Direction
    index: int
    cells: Tuple[Cell, ...]

    def __contains__(self, cell: object) -> bool:
        return cell in self.cells


@dataclass
class Tile:
    """A movable unit on the board."""

    id: str
    char: str
    kind: TileKind
    target: Cell
    position: Cell

    @property
    def is_creature(self) -> bool:
        return self.kind == TileKind.CREATURE

    def moved_to(self, position: Cell) -> "Tile":
        return replace(self, position=position)

    def to_jsonable(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "char": self.char,
            "kind": self.kind.value,
            "target": list(self.target),
            "position": list(self.position),
        }

    @classmethod
    def from_jsonable(cls, data: Dict[str, Any]) -> "Tile":
        try:
            return cls(
                id=str(data["id"]),
                char=str(data["char"]),
                kind=TileKind(data["kind"]),
                target=_as_cell(data["target"]),
                position=_as_cell(data["position"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise CorruptedStateError(f"Malformed tile record: {data!r}") from exc


@dataclass(frozen=True)
class SolutionGrid:
    """Write-once solution: letters, creature symbols and ``None`` for holes."""

    cells: Tuple[Tuple[Optional[str], ...], ...]

    @property
    def bounds(self) -> Bounds:
        return Bounds(rows=len(self.cells), cols=len(self.cells[0]) if self.cells else 0)

    def char_at(self, row: int, col: int) -> Optional[str]:
        return self.cells[row][col]

    def iter_cells(self) -> Iterator[Tuple[Cell, Optional[str]]]:
        for r, row in enumerate(self.cells):
            for c, char in enumerate(row):
                yield (r, c), char

    def creature_cells(self) -> Dict[str, Cell]:
        """Map creature symbol to the cell it occupies."""
        return {char: cell for cell, char in self.iter_cells() if is_creature_symbol(char)}

    def read(self, cells: Sequence[Cell], skip_creatures: bool = True) -> str:
        chars = (self.cells[r][c] for r, c in cells)
        return "".join(
            ch for ch in chars if ch is not None and not (skip_creatures and is_creature_symbol(ch))
        )

    def rows_as_text(self, hole: str = "#") -> List[str]:
        return ["".join(ch if ch is not None else hole for ch in row) for row in self.cells]

    def to_jsonable(self) -> List[List[Optional[str]]]:
        return [list(row) for row in self.cells]

    @classmethod
    def from_jsonable(cls, data: Any) -> "SolutionGrid":
        if not isinstance(data, list) or not data:
            raise CorruptedStateError("Solution grid must be a non-empty list of rows")
        width = None
        rows: List[Tuple[Optional[str], ...]] = []
        for row in data:
            if not isinstance(row, list):
                raise CorruptedStateError("Solution grid row must be a list")
            if width is None:
                width = len(row)
            elif len(row) != width:
                raise CorruptedStateError("Solution grid rows have uneven widths")
            if any(ch is not None and not isinstance(ch, str) for ch in row):
                raise CorruptedStateError("Solution grid cells must be strings or null")
            rows.append(tuple(row))
        return cls(cells=tuple(rows))


@dataclass(frozen=True)
class Feedback:
    """Per-tile correctness signals."""

    exact: FrozenSet[str] = frozenset()
    present: FrozenSet[str] = frozenset()

    def status(self, tile_id: str) -> str:
        if tile_id in self.exact:
            return "exact"
        if tile_id in self.present:
            return "present"
        return "absent"


class MoveRejection(str, Enum):
    UNKNOWN_TILE = "unknown_tile"
    OUT_OF_RANGE = "out_of_range"
    HOLE = "hole"
    SAME_POSITION = "same_position"
    LOCKED_TILE = "locked_tile"
    LOCKED_OCCUPANT = "locked_occupant"


@dataclass(frozen=True)
class MoveResult:
    accepted: bool
    tiles: Tuple[Tile, ...]
    reason: Optional[MoveRejection] = None


def _as_cell(value: Any) -> Cell:
    row, col = value
    if not isinstance(row, int) or not isinstance(col, int):
        raise ValueError(f"Cell coordinates must be integers: {value!r}")
    return row, col
