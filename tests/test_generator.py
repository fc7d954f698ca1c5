import random
import unittest

from reunion.core.constants import Creature, is_creature_symbol
from reunion.core.exceptions import DictionaryUnavailableError, GenerationExhaustedError
from reunion.data.lexicon import Lexicon
from reunion.engine.generator import GeneratorConfig, PuzzleGenerator, generate
from reunion.engine.grid import CREATURE_CONFIGS, FillGrid, GridConfig, are_adjacent, derive_slots
from reunion.engine.solver import SearchStats, fill_slots, order_slots
from reunion.engine.validator import SolutionValidator

from puzzle_fixtures import base_solution, make_lexicon


class GeneratedGridPropertyTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.lexicon = make_lexicon()
        cls.config = GridConfig()

    def test_display_segments_read_as_words(self) -> None:
        for seed in range(12):
            solution = generate(self.lexicon, GeneratorConfig(seed=seed))
            for segment in self.config.display_segments():
                with self.subTest(seed=seed, segment=(segment.direction, segment.index)):
                    word = solution.read(segment.cells)
                    self.assertIn(word, self.lexicon.words_of_length(len(word)))

    def test_creatures_are_distinct_adjacent_and_off_holes(self) -> None:
        for seed in range(12):
            solution = generate(self.lexicon, GeneratorConfig(seed=seed))
            creatures = solution.creature_cells()
            with self.subTest(seed=seed):
                self.assertEqual(
                    set(creatures), {Creature.FOX.symbol, Creature.HEDGEHOG.symbol}
                )
                count = sum(1 for _, ch in solution.iter_cells() if is_creature_symbol(ch))
                self.assertEqual(count, 2)
                fox, hedgehog = creatures[Creature.FOX.symbol], creatures[Creature.HEDGEHOG.symbol]
                self.assertTrue(are_adjacent(fox, hedgehog))
                self.assertFalse(self.config.is_hole(*fox))
                self.assertFalse(self.config.is_hole(*hedgehog))

    def test_holes_stay_empty_and_everything_else_is_filled(self) -> None:
        solution = generate(self.lexicon, GeneratorConfig(seed=3))
        for (r, c), char in solution.iter_cells():
            if self.config.is_hole(r, c):
                self.assertIsNone(char)
            else:
                self.assertIsNotNone(char)

    def test_seeded_generation_is_reproducible(self) -> None:
        first = generate(self.lexicon, GeneratorConfig(seed=11))
        second = generate(self.lexicon, GeneratorConfig(seed=11))
        self.assertEqual(first, second)

    def test_generated_solution_passes_validation(self) -> None:
        solution = generate(self.lexicon, GeneratorConfig(seed=5))
        self.assertTrue(SolutionValidator(self.lexicon).validate(solution).ok)


class CreatureRowScenarioTests(unittest.TestCase):
    def test_row_zero_reads_creature_then_four_letter_word(self) -> None:
        lexicon = make_lexicon()
        generator = PuzzleGenerator(lexicon, GeneratorConfig(seed=2))
        solution = generator.generate_with(((0, 0), (1, 0)))

        self.assertEqual(solution.char_at(0, 0), Creature.FOX.symbol)
        self.assertEqual(solution.char_at(1, 0), Creature.HEDGEHOG.symbol)
        word = solution.read([(0, c) for c in range(5)])
        self.assertEqual(len(word), 4)
        self.assertIn(word, lexicon.words_of_length(4))


class GenerationFailureTests(unittest.TestCase):
    def test_empty_lexicon_raises_dictionary_unavailable(self) -> None:
        generator = PuzzleGenerator(Lexicon(), GeneratorConfig(seed=1))
        with self.assertRaises(DictionaryUnavailableError):
            generator.generate()
        self.assertEqual(generator.reports, [])

    def test_unfillable_lexicon_exhausts_every_attempt(self) -> None:
        lexicon = Lexicon(["CAT", "DOG", "WOLF", "HOUSE", "KITCHEN"])
        generator = PuzzleGenerator(lexicon, GeneratorConfig(seed=1, retry_limit=4))
        with self.assertRaises(GenerationExhaustedError):
            generator.generate()
        self.assertEqual(len(generator.reports), 4)
        self.assertTrue(all(report.error for report in generator.reports))

    def test_zero_candidate_cap_never_fills(self) -> None:
        generator = PuzzleGenerator(
            make_lexicon(), GeneratorConfig(seed=1, max_candidates=0, retry_limit=2)
        )
        with self.assertRaises(GenerationExhaustedError):
            generator.generate()

    def test_stranded_cells_are_reported_not_filled(self) -> None:
        config = GridConfig(creature_configs=(((2, 0), (2, 1)),))
        generator = PuzzleGenerator(make_lexicon(), GeneratorConfig(seed=1, retry_limit=1, grid=config))
        with self.assertRaises(GenerationExhaustedError):
            generator.generate()
        self.assertIn("outside every slot", generator.reports[0].error or "")

    def test_every_placement_is_drawn_eventually(self) -> None:
        generator = PuzzleGenerator(make_lexicon(), GeneratorConfig(seed=0))
        drawn = {generator.choose_placement() for _ in range(400)}
        self.assertEqual(drawn, set(CREATURE_CONFIGS))


class SolverTests(unittest.TestCase):
    def test_slots_are_ordered_longest_first(self) -> None:
        grid = FillGrid(GridConfig())
        grid.place_creatures(((0, 0), (1, 0)))
        lengths = [slot.length for slot in order_slots(derive_slots(grid))]
        self.assertEqual(lengths, sorted(lengths, reverse=True))
        self.assertEqual(lengths[0], 7)

    def test_failed_fill_restores_original_cells(self) -> None:
        grid = FillGrid(GridConfig())
        grid.place_creatures(((0, 0), (1, 0)))
        slots = order_slots(derive_slots(grid))
        before = [row[:] for row in grid.cells]
        # Enough words for the long columns but no 4-letter word for row 0
        lexicon = Lexicon(w for w in make_lexicon().words_of_length(7))
        stats = SearchStats()

        ok = fill_slots(grid, slots, lexicon, random.Random(0), stats=stats)

        self.assertFalse(ok)
        self.assertEqual(grid.cells, before)
        self.assertGreater(stats.nodes, 0)

    def test_successful_fill_matches_lexicon(self) -> None:
        placement = ((6, 3), (6, 4))
        lexicon = make_lexicon(placements=[placement], extra=())
        grid = FillGrid(GridConfig())
        grid.place_creatures(placement)
        slots = order_slots(derive_slots(grid))

        self.assertTrue(fill_slots(grid, slots, lexicon, random.Random(4)))
        # Only one fill exists for a lexicon cut from a single board.
        self.assertEqual(grid.freeze(), base_solution(placement))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
