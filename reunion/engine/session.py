"""Serializable game session: solution, live tiles and move counter."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple

from ..core.constants import FIXED_LETTER_COUNT, Cell, Creature, TileKind, is_creature_symbol
from ..core.exceptions import CorruptedStateError
from ..core.models import Feedback, MoveResult, SolutionGrid, Tile
from ..data.lexicon import Lexicon
from ..utils.logger import get_logger
from .feedback import check_win, evaluate
from .generator import GeneratorConfig, PuzzleGenerator
from .grid import GridConfig
from .moves import apply_move


LOGGER = get_logger(__name__)

_CREATURE_BY_SYMBOL = {creature.symbol: creature for creature in Creature}


class StatsRecorder(Protocol):
    """Aggregates finished games; the engine only ever writes to it."""

    def record(self, move_count: int, did_win: bool) -> None:
        ...


@dataclass
class GameSession:
    """Everything needed to resume a game, passed explicitly to the engine."""

    solution: SolutionGrid
    tiles: Tuple[Tile, ...]
    move_count: int = 0
    won: bool = False
    grid_config: GridConfig = field(default_factory=GridConfig, repr=False, compare=False)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def deal(
        cls,
        solution: SolutionGrid,
        rng: Optional[random.Random] = None,
        grid_config: Optional[GridConfig] = None,
        fixed_letters: int = FIXED_LETTER_COUNT,
    ) -> "GameSession":
        """Create tiles for ``solution`` and lay out the opening position.

        Creatures start on their configured cells, ``fixed_letters`` random
        letters start on their own targets, and the rest are scrambled over
        the remaining cells.
        """

        rng = rng or random.Random()
        config = grid_config or GridConfig()

        creatures: Dict[Creature, Tile] = {}
        letters: List[Tile] = []
        for (row, col), char in solution.iter_cells():
            if char is None:
                continue
            creature = _CREATURE_BY_SYMBOL.get(char)
            if creature is not None:
                creatures[creature] = Tile(
                    id=creature.value,
                    char=char,
                    kind=TileKind.CREATURE,
                    target=(row, col),
                    position=(row, col),
                )
            else:
                letters.append(
                    Tile(
                        id=f"tile-{row}-{col}",
                        char=char,
                        kind=TileKind.LETTER,
                        target=(row, col),
                        position=(row, col),
                    )
                )

        available: List[Cell] = [
            cell for cell, char in solution.iter_cells() if char is not None
        ]
        placed: List[Tile] = []
        starts = set()
        for creature, tile in creatures.items():
            start = config.creature_starts.get(creature, tile.target)
            placed.append(tile.moved_to(start))
            starts.add(start)
        available = [cell for cell in available if cell not in starts]

        fixable = [tile for tile in letters if tile.target not in starts]
        rng.shuffle(fixable)
        fixed = fixable[:fixed_letters]
        fixed_ids = {tile.id for tile in fixed}
        placed.extend(fixed)
        fixed_cells = {tile.target for tile in fixed}
        available = [cell for cell in available if cell not in fixed_cells]

        remaining = [tile for tile in letters if tile.id not in fixed_ids]
        rng.shuffle(available)
        placed.extend(tile.moved_to(cell) for tile, cell in zip(remaining, available))

        order = {tile.id: index for index, tile in enumerate(creatures.values())}
        order.update({tile.id: len(order) + index for index, tile in enumerate(letters)})
        placed.sort(key=lambda tile: order[tile.id])
        return cls(solution=solution, tiles=tuple(placed), grid_config=config)

    # ------------------------------------------------------------------
    # Play
    # ------------------------------------------------------------------
    def feedback(self) -> Feedback:
        return evaluate(self.tiles, self.solution, self.grid_config)

    def is_won(self) -> bool:
        return check_win(self.tiles, self.solution)

    def move(
        self,
        tile_id: str,
        target_row: int,
        target_col: int,
        recorder: Optional[StatsRecorder] = None,
    ) -> MoveResult:
        result = apply_move(
            self.tiles, tile_id, target_row, target_col, self.solution, self.grid_config
        )
        if not result.accepted:
            return result
        self.tiles = result.tiles
        self.move_count += 1
        if not self.won and self.is_won():
            self.won = True
            LOGGER.info("Puzzle solved in %d moves", self.move_count)
            if recorder is not None:
                recorder.record(self.move_count, True)
        return result

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_jsonable(self) -> Dict[str, Any]:
        return {
            "solution_grid": self.solution.to_jsonable(),
            "tiles": [tile.to_jsonable() for tile in self.tiles],
            "move_count": self.move_count,
            "won": self.won,
        }

    @classmethod
    def from_jsonable(
        cls, data: Any, grid_config: Optional[GridConfig] = None
    ) -> "GameSession":
        """Rebuild a session, raising :class:`CorruptedStateError` on anything malformed."""

        if not isinstance(data, dict):
            raise CorruptedStateError("Session state must be an object")
        try:
            raw_grid = data["solution_grid"]
            raw_tiles = data["tiles"]
            move_count = data["move_count"]
        except KeyError as exc:
            raise CorruptedStateError(f"Session state missing {exc}") from exc
        if not isinstance(raw_tiles, list):
            raise CorruptedStateError("Session tiles must be a list")
        if not isinstance(move_count, int) or isinstance(move_count, bool) or move_count < 0:
            raise CorruptedStateError(f"Invalid move count: {move_count!r}")
        won = data.get("won", False)
        if not isinstance(won, bool):
            raise CorruptedStateError(f"Invalid won flag: {won!r}")

        config = grid_config or GridConfig()
        solution = SolutionGrid.from_jsonable(raw_grid)
        _check_grid(solution, config)
        tiles = tuple(Tile.from_jsonable(item) for item in raw_tiles)
        _check_layout(solution, tiles)
        return cls(
            solution=solution,
            tiles=tiles,
            move_count=move_count,
            won=won,
            grid_config=config,
        )


def _check_grid(solution: SolutionGrid, config: GridConfig) -> None:
    """The saved solution must fit the board it will be played on."""

    if solution.bounds != config.bounds():
        raise CorruptedStateError(
            f"Solution is {solution.bounds.rows}x{solution.bounds.cols}, "
            f"board is {config.rows}x{config.cols}"
        )
    creatures: List[str] = []
    for (row, col), char in solution.iter_cells():
        if config.is_hole(row, col):
            if char is not None:
                raise CorruptedStateError(f"Hole at {(row, col)} holds {char!r}")
        elif char is None:
            raise CorruptedStateError(f"Empty cell at {(row, col)} is not a hole")
        elif is_creature_symbol(char):
            creatures.append(char)
        elif len(char) != 1 or not ("A" <= char <= "Z"):
            raise CorruptedStateError(f"Invalid letter {char!r} at {(row, col)}")
    if sorted(creatures) != sorted(creature.symbol for creature in Creature):
        raise CorruptedStateError(f"Expected one of each creature, found {creatures}")


def _check_layout(solution: SolutionGrid, tiles: Tuple[Tile, ...]) -> None:
    bounds = solution.bounds
    filled = {cell: char for cell, char in solution.iter_cells() if char is not None}

    ids = [tile.id for tile in tiles]
    if len(set(ids)) != len(ids):
        raise CorruptedStateError("Duplicate tile ids")
    targets = [tile.target for tile in tiles]
    if sorted(targets) != sorted(filled):
        raise CorruptedStateError("Tile targets do not cover the solution cells")
    positions = [tile.position for tile in tiles]
    if len(set(positions)) != len(positions):
        raise CorruptedStateError("Two tiles share a cell")
    for tile in tiles:
        if not bounds.contains(*tile.position) or tile.position not in filled:
            raise CorruptedStateError(f"Tile {tile.id} sits off the board at {tile.position}")
        if filled[tile.target] != tile.char:
            raise CorruptedStateError(f"Tile {tile.id} does not match its target")
        if tile.is_creature != is_creature_symbol(tile.char):
            raise CorruptedStateError(f"Tile {tile.id} has the wrong kind")


def new_session(
    lexicon: Lexicon,
    config: Optional[GeneratorConfig] = None,
    rng: Optional[random.Random] = None,
) -> GameSession:
    """Generate a fresh puzzle and deal its opening position.

    Raises the generator's :class:`ReunionError` subclasses on failure; no
    half-built session is ever returned.
    """

    config = config or GeneratorConfig()
    solution = PuzzleGenerator(lexicon, config).generate()
    rng = rng or random.Random(config.seed)
    return GameSession.deal(solution, rng=rng, grid_config=config.grid)
