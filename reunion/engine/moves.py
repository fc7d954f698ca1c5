"""Move validation and slot swap semantics."""

from __future__ import annotations

from typing import Iterable, Optional

from ..core.models import MoveRejection, MoveResult, SolutionGrid, Tile
from ..utils.logger import get_logger
from .feedback import is_exact
from .grid import GridConfig


LOGGER = get_logger(__name__)


def apply_move(
    tiles: Iterable[Tile],
    tile_id: str,
    target_row: int,
    target_col: int,
    solution: SolutionGrid,
    grid_config: Optional[GridConfig] = None,
) -> MoveResult:
    """Move ``tile_id`` to the target cell, swapping with any occupant.

    The input tiles are never mutated. A rejected move returns the original
    tiles untouched together with the reason; rejection is routine and is
    not raised.
    """

    config = grid_config or GridConfig()
    tiles = tuple(tiles)
    target = (target_row, target_col)

    def reject(reason: MoveRejection) -> MoveResult:
        LOGGER.debug("Rejected move of %s to %s: %s", tile_id, target, reason.value)
        return MoveResult(accepted=False, tiles=tiles, reason=reason)

    mover = next((tile for tile in tiles if tile.id == tile_id), None)
    if mover is None:
        return reject(MoveRejection.UNKNOWN_TILE)
    if not config.bounds().contains(target_row, target_col):
        return reject(MoveRejection.OUT_OF_RANGE)
    if config.is_hole(target_row, target_col):
        return reject(MoveRejection.HOLE)
    if mover.position == target:
        return reject(MoveRejection.SAME_POSITION)
    if is_exact(mover, solution):
        return reject(MoveRejection.LOCKED_TILE)

    occupant = next((tile for tile in tiles if tile.position == target), None)
    if occupant is not None and is_exact(occupant, solution):
        return reject(MoveRejection.LOCKED_OCCUPANT)

    origin = mover.position
    updated = []
    for tile in tiles:
        if tile.id == mover.id:
            updated.append(tile.moved_to(target))
        elif occupant is not None and tile.id == occupant.id:
            updated.append(tile.moved_to(origin))
        else:
            updated.append(tile)
    return MoveResult(accepted=True, tiles=tuple(updated))
