"""Randomized, bounded backtracking fill over the derived slots."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..core.constants import MAX_CANDIDATES
from ..core.models import Slot
from ..data.lexicon import Lexicon
from ..utils.logger import get_logger
from .grid import FillGrid

LOGGER = get_logger(__name__)


@dataclass
class SearchStats:
    """Counters describing one fill attempt."""

    nodes: int = 0
    placements: int = 0
    backtracks: int = 0
    dead_ends: int = 0


def order_slots(slots: Sequence[Slot]) -> List[Slot]:
    """Longest first; ties keep derivation order."""
    return sorted(slots, key=lambda slot: slot.length, reverse=True)


def fill_slots(
    grid: FillGrid,
    slots: Sequence[Slot],
    lexicon: Lexicon,
    rng: random.Random,
    max_candidates: int = MAX_CANDIDATES,
    stats: Optional[SearchStats] = None,
) -> bool:
    """Fill ``slots`` in order, writing into ``grid``.

    Candidates for each slot are shuffled and only the first
    ``max_candidates`` are tried, which bounds the branching factor at the
    cost of occasionally missing a fill that exists. On failure every cell
    is back to the value it held before the call.
    """

    stats = stats if stats is not None else SearchStats()
    return _fill(grid, slots, 0, lexicon, rng, max_candidates, stats)


def _fill(
    grid: FillGrid,
    slots: Sequence[Slot],
    index: int,
    lexicon: Lexicon,
    rng: random.Random,
    max_candidates: int,
    stats: SearchStats,
) -> bool:
    if index >= len(slots):
        return True

    stats.nodes += 1
    slot = slots[index]
    pattern = grid.pattern(slot)
    candidates = lexicon.find_candidates(slot.length, pattern)
    rng.shuffle(candidates)

    if not candidates:
        stats.dead_ends += 1
        LOGGER.debug(
            "No candidates for %s pattern=%s",
            slot.id,
            "".join(ch or "." for ch in pattern),
        )
        return False

    for word in candidates[:max_candidates]:
        backup = grid.write(slot, word)
        stats.placements += 1
        if _fill(grid, slots, index + 1, lexicon, rng, max_candidates, stats):
            return True
        grid.restore(slot, backup)
        stats.backtracks += 1

    LOGGER.debug("Exhausted %s after %d candidates", slot.id, min(len(candidates), max_candidates))
    return False
