"""Puzzle generation orchestration.

One attempt:
  1. Pick a creature placement from the enumerated table.
  2. Derive slots from the board and the creature cells.
  3. Order slots longest first and fill them by bounded backtracking.
  4. Validate the filled grid and freeze it into a :class:`SolutionGrid`.

:meth:`PuzzleGenerator.generate` repeats attempts with fresh placements up to
``retry_limit`` times.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional

from ..core.constants import GENERATION_ATTEMPTS, MAX_CANDIDATES
from ..core.exceptions import (
    DictionaryUnavailableError,
    GenerationExhaustedError,
    ReunionError,
    SlotDerivationError,
    ValidationError,
)
from ..core.models import Slot, SolutionGrid
from ..data.lexicon import Lexicon
from ..utils.logger import get_logger
from .grid import CreaturePlacement, FillGrid, GridConfig, derive_slots, uncovered_cells
from .solver import SearchStats, fill_slots, order_slots
from .validator import SolutionValidator


LOGGER = get_logger(__name__)


@dataclass
class GeneratorConfig:
    seed: Optional[int] = None
    max_candidates: int = MAX_CANDIDATES
    retry_limit: int = GENERATION_ATTEMPTS
    grid: GridConfig = field(default_factory=GridConfig)


@dataclass
class AttemptReport:
    placement: CreaturePlacement
    slots: List[Slot]
    stats: SearchStats
    error: Optional[str] = None


class PuzzleGenerator:
    """Builds one fully consistent solution grid from a lexicon."""

    def __init__(self, lexicon: Lexicon, config: Optional[GeneratorConfig] = None) -> None:
        self.lexicon = lexicon
        self.config = config or GeneratorConfig()
        self.rng = random.Random(self.config.seed)
        self.validator = SolutionValidator(lexicon, self.config.grid)
        self.reports: List[AttemptReport] = []

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def generate(self) -> SolutionGrid:
        if self.lexicon.is_empty:
            raise DictionaryUnavailableError("Lexicon is empty; no slot can be filled")
        if not self.config.grid.creature_configs:
            raise GenerationExhaustedError("No creature placements configured")

        self.reports = []
        for attempt in range(1, self.config.retry_limit + 1):
            placement = self.choose_placement()
            LOGGER.info(
                "Generation attempt %s/%s with creatures at %s",
                attempt,
                self.config.retry_limit,
                placement,
            )
            try:
                solution = self.generate_with(placement)
            except ReunionError as exc:
                LOGGER.warning("Generation attempt failed: %s", exc)
                continue
            LOGGER.info("Puzzle generated after %s attempt(s)", attempt)
            return solution
        raise GenerationExhaustedError(
            f"Unable to generate a puzzle after {self.config.retry_limit} attempts"
        )

    def choose_placement(self) -> CreaturePlacement:
        return self.rng.choice(self.config.grid.creature_configs)

    def generate_with(self, placement: CreaturePlacement) -> SolutionGrid:
        """Run one attempt for a fixed creature placement."""

        grid = FillGrid(self.config.grid)
        grid.place_creatures(placement)
        slots = order_slots(derive_slots(grid))
        report = AttemptReport(placement=placement, slots=slots, stats=SearchStats())
        self.reports.append(report)

        try:
            stranded = uncovered_cells(grid, slots)
            if stranded:
                raise SlotDerivationError(f"Cells outside every slot: {stranded}")
            if not fill_slots(
                grid,
                slots,
                self.lexicon,
                self.rng,
                max_candidates=self.config.max_candidates,
                stats=report.stats,
            ):
                raise GenerationExhaustedError(
                    f"No consistent fill for placement {placement} "
                    f"({report.stats.nodes} nodes, {report.stats.backtracks} backtracks)"
                )
            solution = grid.freeze()
            validation = self.validator.validate(solution)
            if not validation.ok:
                raise ValidationError(f"Grid validation failed: {validation.messages}")
        except ReunionError as exc:
            report.error = str(exc)
            raise

        LOGGER.debug("Filled grid:\n%s", grid.to_text())
        return solution


def generate(lexicon: Lexicon, config: Optional[GeneratorConfig] = None) -> SolutionGrid:
    """Generate a solution grid; reproducible when ``config.seed`` is set."""
    return PuzzleGenerator(lexicon, config).generate()
