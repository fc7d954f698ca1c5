"""Shared constants and enumerations for the Reunion puzzle engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class Direction(str, Enum):
    """Orientation of a slot or display segment."""

    ROW = "ROW"
    COLUMN = "COLUMN"


class CellKind(str, Enum):
    """Static classification of a grid cell."""

    HOLE = "HOLE"
    CREATURE = "CREATURE"
    LETTER = "LETTER"


class TileKind(str, Enum):
    LETTER = "letter"
    CREATURE = "creature"


class Creature(str, Enum):
    """The two mobile creature tiles. Values double as tile ids."""

    FOX = "fox"
    HEDGEHOG = "hedgehog"

    @property
    def symbol(self) -> str:
        return CREATURE_SYMBOLS[self]


CREATURE_SYMBOLS = {
    Creature.FOX: "\U0001F98A",
    Creature.HEDGEHOG: "\U0001F994",
}

KING_STEPS: Tuple[Tuple[int, int], ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
)

Cell = Tuple[int, int]

DEFAULT_ROWS = 7
DEFAULT_COLS = 5
DEFAULT_HOLES: Tuple[Cell, ...] = ((1, 1), (1, 3), (3, 1), (3, 3), (5, 1), (5, 3))
DEFAULT_CREATURE_STARTS: Tuple[Tuple[Creature, Cell], ...] = (
    (Creature.FOX, (0, 2)),
    (Creature.HEDGEHOG, (6, 2)),
)
DEFAULT_DISPLAY_ROWS: Tuple[int, ...] = (0, 2, 4, 6)
DEFAULT_DISPLAY_COLS: Tuple[int, ...] = (0, 2, 4)

MIN_SLOT_LENGTH = 3
MAX_WORD_LENGTH = 7
MAX_CANDIDATES = 50
GENERATION_ATTEMPTS = 10
FIXED_LETTER_COUNT = 5

DEFAULT_STATE_KEY = "reunion_state"


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    rows: int
    cols: int

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols


def is_creature_symbol(char: object) -> bool:
    return char in CREATURE_SYMBOLS.values()
