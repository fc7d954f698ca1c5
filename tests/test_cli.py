import io
import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

import main as cli

from puzzle_fixtures import make_lexicon


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.words = self.tmp / "words.txt"
        lexicon = make_lexicon()
        words = [w for n in lexicon.lengths() for w in sorted(lexicon.words_of_length(n))]
        self.words.write_text("\n".join(words), encoding="utf-8")
        self.base_args = ["--dictionary", str(self.words), "--seed", "3", "--state-dir", str(self.tmp / "state")]

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def run_cli(self, *args: str):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = cli.main([*self.base_args, *args])
        return code, out.getvalue(), err.getvalue()

    def test_generate_prints_json(self) -> None:
        code, out, _ = self.run_cli("generate")
        self.assertEqual(code, 0)
        payload = json.loads(out)
        self.assertEqual(payload["seed"], 3)
        self.assertEqual(len(payload["grid"]), 7)

    def test_generate_writes_output_file(self) -> None:
        target = self.tmp / "puzzle.json"
        code, out, _ = self.run_cli("generate", "--output", str(target))
        self.assertEqual(code, 0)
        self.assertEqual(len(json.loads(target.read_text(encoding="utf-8"))["rows"]), 7)
        self.assertIn("##", out)

    def test_generate_without_words_fails(self) -> None:
        self.words.write_text("", encoding="utf-8")
        code, _, err = self.run_cli("generate")
        self.assertEqual(code, 1)
        self.assertIn("check connectivity", err)

    def test_new_then_show_and_move(self) -> None:
        code, out, _ = self.run_cli("new")
        self.assertEqual(code, 0)
        self.assertIn("Moves: 0", out)

        code, out, _ = self.run_cli("show")
        self.assertEqual(code, 0)
        self.assertIn("Moves: 0", out)

        code, _, err = self.run_cli("move", "fox", "1", "1")
        self.assertEqual(code, 0)
        self.assertIn("Invalid move (hole)", err)

    def test_show_without_saved_game(self) -> None:
        code, _, err = self.run_cli("show")
        self.assertEqual(code, 1)
        self.assertIn("No saved game", err)

    def test_show_treats_corrupted_game_as_missing(self) -> None:
        state_dir = self.tmp / "state"
        state_dir.mkdir()
        tile = {"id": "tile-0-0", "char": "A", "kind": "letter", "target": [0, 0], "position": [0, 0]}
        state = {"solution_grid": [["A"]], "tiles": [tile], "move_count": 0, "won": False}
        (state_dir / "reunion_state.json").write_text(json.dumps({"state": state}), encoding="utf-8")
        code, _, err = self.run_cli("show")
        self.assertEqual(code, 1)
        self.assertIn("No saved game", err)

    def test_stats(self) -> None:
        code, out, _ = self.run_cli("stats")
        self.assertEqual(code, 0)
        self.assertIn("Solved:     0", out)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
