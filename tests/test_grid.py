import unittest

from reunion.core.constants import Creature, Direction
from reunion.core.exceptions import SlotDerivationError, ValidationError
from reunion.engine.grid import (
    CREATURE_CONFIGS,
    FillGrid,
    GridConfig,
    are_adjacent,
    derive_slots,
    is_valid_creature_config,
    uncovered_cells,
)

from puzzle_fixtures import base_grid


class TopologyTests(unittest.TestCase):
    def test_default_board_has_29_playable_cells(self) -> None:
        config = GridConfig()
        self.assertEqual(len(config.playable_cells()), 29)
        self.assertTrue(config.is_hole(3, 3))
        self.assertFalse(config.is_hole(3, 2))

    def test_display_segments_span_whole_lines(self) -> None:
        segments = GridConfig().display_segments()
        self.assertEqual(len(segments), 7)
        row0 = segments[0]
        self.assertEqual(row0.direction, Direction.ROW)
        self.assertEqual(row0.cells, ((0, 0), (0, 1), (0, 2), (0, 3), (0, 4)))
        col2 = next(s for s in segments if s.direction == Direction.COLUMN and s.index == 2)
        self.assertEqual(len(col2.cells), 7)
        self.assertIn((3, 2), col2)

    def test_adjacency_is_eight_directional(self) -> None:
        self.assertTrue(are_adjacent((2, 2), (3, 3)))
        self.assertTrue(are_adjacent((2, 2), (2, 1)))
        self.assertFalse(are_adjacent((2, 2), (2, 2)))
        self.assertFalse(are_adjacent((2, 2), (4, 2)))
        self.assertFalse(are_adjacent((0, 0), (1, 2)))


class CreatureTableTests(unittest.TestCase):
    def test_every_table_entry_is_valid(self) -> None:
        config = GridConfig()
        for placement in CREATURE_CONFIGS:
            with self.subTest(placement=placement):
                self.assertTrue(is_valid_creature_config(config, placement))

    def test_table_has_vertical_and_horizontal_variants(self) -> None:
        vertical = [p for p in CREATURE_CONFIGS if p[0][1] == p[1][1]]
        horizontal = [p for p in CREATURE_CONFIGS if p[0][0] == p[1][0]]
        self.assertEqual(len(vertical), 4)
        self.assertEqual(len(horizontal), 4)

    def test_rejects_invalid_placements(self) -> None:
        config = GridConfig()
        self.assertFalse(is_valid_creature_config(config, ((0, 1), (1, 0))))  # strands (0,0)
        self.assertFalse(is_valid_creature_config(config, ((2, 0), (3, 0))))  # splits column 0
        self.assertFalse(is_valid_creature_config(config, ((0, 0), (1, 1))))  # hole
        self.assertFalse(is_valid_creature_config(config, ((0, 0), (0, 4))))  # not adjacent
        self.assertFalse(is_valid_creature_config(config, ((0, 0), (9, 9))))  # off board


class SlotDerivationTests(unittest.TestCase):
    def test_slots_for_top_left_vertical_pair(self) -> None:
        grid = FillGrid(GridConfig())
        grid.place_creatures(((0, 0), (1, 0)))
        slots = {slot.id: slot.length for slot in derive_slots(grid)}
        self.assertEqual(
            slots,
            {
                "ROW_0_1": 4,
                "ROW_2_0": 5,
                "ROW_4_0": 5,
                "ROW_6_0": 5,
                "COL_2_0": 5,
                "COL_0_2": 7,
                "COL_0_4": 7,
            },
        )
        self.assertEqual(uncovered_cells(grid, derive_slots(grid)), [])

    def test_short_runs_are_dropped_and_reported(self) -> None:
        grid = FillGrid(GridConfig())
        grid.place_creatures(((2, 0), (2, 1)))
        slots = derive_slots(grid)
        self.assertNotIn("COL_0_0", {slot.id for slot in slots})
        self.assertIn((1, 0), uncovered_cells(grid, slots))

    def test_creature_on_hole_is_refused(self) -> None:
        grid = FillGrid(GridConfig())
        with self.assertRaises(SlotDerivationError):
            grid.place_creatures(((1, 1), (0, 0)))

    def test_creature_symbols_follow_placement_order(self) -> None:
        grid = FillGrid(GridConfig())
        grid.place_creatures(((6, 3), (6, 4)))
        self.assertEqual(grid.cells[6][3], Creature.FOX.symbol)
        self.assertEqual(grid.cells[6][4], Creature.HEDGEHOG.symbol)


class FillBufferTests(unittest.TestCase):
    def test_restore_puts_back_prior_contents(self) -> None:
        grid = FillGrid(GridConfig())
        grid.place_creatures(((0, 0), (1, 0)))
        slots = {slot.id: slot for slot in derive_slots(grid)}
        column = slots["COL_0_2"]
        grid.cells[2][2] = "V"

        backup = grid.write(column, "ABCDEFG")
        self.assertEqual(grid.pattern(column), list("ABCDEFG"))
        grid.restore(column, backup)

        self.assertEqual(grid.pattern(column), [None, None, "V", None, None, None, None])

    def test_freeze_requires_complete_grid(self) -> None:
        grid = FillGrid(GridConfig())
        self.assertFalse(grid.is_complete())
        with self.assertRaises(ValidationError):
            grid.freeze()
        filled = base_grid(((0, 0), (1, 0)))
        self.assertTrue(filled.is_complete())
        solution = filled.freeze()
        self.assertIsNone(solution.char_at(1, 1))
        self.assertEqual(solution.char_at(2, 2), "V")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
