import unittest

from reunion.core.models import MoveRejection
from reunion.engine.feedback import is_exact
from reunion.engine.moves import apply_move

from puzzle_fixtures import base_solution, solved_tiles, swap, tile_by_id


class ApplyMoveTests(unittest.TestCase):
    def setUp(self) -> None:
        self.solution = base_solution(((6, 3), (6, 4)))
        # P and L trade places so both are free to move.
        self.tiles = swap(solved_tiles(self.solution), "tile-0-0", "tile-0-1")

    def assert_rejected(self, tile_id: str, row: int, col: int, reason: MoveRejection) -> None:
        snapshot = [tile.to_jsonable() for tile in self.tiles]
        result = apply_move(self.tiles, tile_id, row, col, self.solution)
        self.assertFalse(result.accepted)
        self.assertEqual(result.reason, reason)
        self.assertEqual(result.tiles, self.tiles)
        self.assertEqual([tile.to_jsonable() for tile in self.tiles], snapshot)

    def test_unknown_tile(self) -> None:
        self.assert_rejected("tile-9-9", 0, 0, MoveRejection.UNKNOWN_TILE)

    def test_out_of_range(self) -> None:
        self.assert_rejected("tile-0-0", 7, 0, MoveRejection.OUT_OF_RANGE)
        self.assert_rejected("tile-0-0", 0, 5, MoveRejection.OUT_OF_RANGE)
        self.assert_rejected("tile-0-0", -1, 0, MoveRejection.OUT_OF_RANGE)

    def test_hole(self) -> None:
        self.assert_rejected("tile-0-0", 1, 1, MoveRejection.HOLE)
        self.assert_rejected("fox", 3, 3, MoveRejection.HOLE)

    def test_same_position(self) -> None:
        self.assert_rejected("tile-0-0", 0, 1, MoveRejection.SAME_POSITION)

    def test_exact_tile_is_locked(self) -> None:
        self.assertTrue(is_exact(tile_by_id(self.tiles, "tile-2-0"), self.solution))
        self.assert_rejected("tile-2-0", 0, 0, MoveRejection.LOCKED_TILE)

    def test_exact_occupant_is_locked(self) -> None:
        self.assert_rejected("fox", 2, 0, MoveRejection.LOCKED_OCCUPANT)
        self.assert_rejected("tile-0-0", 4, 4, MoveRejection.LOCKED_OCCUPANT)

    def test_swap_with_occupant(self) -> None:
        result = apply_move(self.tiles, "tile-0-0", 0, 0, self.solution)

        self.assertTrue(result.accepted)
        self.assertIsNone(result.reason)
        self.assertEqual(tile_by_id(result.tiles, "tile-0-0").position, (0, 0))
        self.assertEqual(tile_by_id(result.tiles, "tile-0-1").position, (0, 1))
        self.assertEqual(len(result.tiles), len(self.tiles))
        # the original layout is untouched
        self.assertEqual(tile_by_id(self.tiles, "tile-0-0").position, (0, 1))

    def test_creatures_can_swap_with_free_letters(self) -> None:
        result = apply_move(self.tiles, "hedgehog", 0, 0, self.solution)
        self.assertTrue(result.accepted)
        self.assertEqual(tile_by_id(result.tiles, "hedgehog").position, (0, 0))
        self.assertEqual(tile_by_id(result.tiles, "tile-0-1").position, (6, 4))

    def test_creature_on_its_solution_cell_still_moves(self) -> None:
        result = apply_move(self.tiles, "fox", 6, 4, self.solution)
        self.assertTrue(result.accepted)
        self.assertEqual(tile_by_id(result.tiles, "fox").position, (6, 4))
        self.assertEqual(tile_by_id(result.tiles, "hedgehog").position, (6, 3))

    def test_move_into_vacant_cell(self) -> None:
        tiles = tuple(t for t in self.tiles if t.id != "tile-0-1")
        result = apply_move(tiles, "tile-0-0", 0, 0, self.solution)
        self.assertTrue(result.accepted)
        self.assertEqual(tile_by_id(result.tiles, "tile-0-0").position, (0, 0))
        positions = [t.position for t in result.tiles]
        self.assertEqual(len(positions), len(set(positions)))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
