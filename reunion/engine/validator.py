"""Deterministic integrity checks for a filled solution grid."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ..core.constants import CREATURE_SYMBOLS
from ..core.exceptions import ValidationError
from ..core.models import SolutionGrid
from ..data.lexicon import Lexicon
from ..utils.logger import get_logger
from .grid import FillGrid, GridConfig, are_adjacent, derive_slots


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class SolutionValidator:
    """Runs deterministic validation over a generated solution."""

    def __init__(self, lexicon: Lexicon, config: Optional[GridConfig] = None) -> None:
        self.lexicon = lexicon
        self.config = config or GridConfig()

    def validate(self, solution: SolutionGrid) -> ValidationResult:
        try:
            grid = FillGrid.from_solution(self.config, solution)
            self._check_cells(grid)
            self._check_creatures(solution)
            self._check_slots(grid)
            self._check_display_segments(solution)
        except ValidationError as exc:
            LOGGER.error("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=[str(exc)])
        return ValidationResult(ok=True, messages=[])

    def _check_cells(self, grid: FillGrid) -> None:
        for r in range(grid.bounds.rows):
            for c in range(grid.bounds.cols):
                char = grid.cells[r][c]
                if self.config.is_hole(r, c):
                    if char is not None:
                        raise ValidationError(f"Hole at ({r},{c}) holds '{char}'")
                    continue
                if char is None:
                    raise ValidationError(f"Unfilled cell at ({r},{c})")
                if char in CREATURE_SYMBOLS.values():
                    continue
                if len(char) != 1 or not char.isalpha() or not char.isupper():
                    raise ValidationError(f"Invalid letter '{char}' at ({r},{c})")

    def _check_creatures(self, solution: SolutionGrid) -> None:
        placed = solution.creature_cells()
        symbols = set(CREATURE_SYMBOLS.values())
        if set(placed) != symbols:
            raise ValidationError(f"Expected creatures {sorted(symbols)}, found {sorted(placed)}")
        count = sum(1 for _, char in solution.iter_cells() if char in symbols)
        if count != len(symbols):
            raise ValidationError(f"Expected {len(symbols)} creature cells, found {count}")
        first, second = placed.values()
        if not are_adjacent(first, second):
            raise ValidationError(f"Creatures at {first} and {second} are not adjacent")

    def _check_slots(self, grid: FillGrid) -> None:
        for slot in derive_slots(grid):
            word = "".join(ch or "" for ch in grid.pattern(slot))
            if not self.lexicon.contains(word):
                raise ValidationError(f"Invalid word '{word}' in {slot.id}")

    def _check_display_segments(self, solution: SolutionGrid) -> None:
        for segment in self.config.display_segments():
            word = solution.read(segment.cells)
            if not self.lexicon.contains(word):
                raise ValidationError(
                    f"Display {segment.direction.value.lower()} {segment.index} reads '{word}'"
                )
