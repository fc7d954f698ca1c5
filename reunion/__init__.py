"""Reunion: a word-fill puzzle with two creatures that must meet.

This package exposes the public API surface via:

- ``reunion.data.lexicon.Lexicon``: length-bucketed word list.
- ``reunion.engine.generator.PuzzleGenerator``: builds a solution grid.
- ``reunion.engine.feedback``: ``evaluate`` and ``check_win``.
- ``reunion.engine.moves.apply_move``: validated tile swaps.
- ``reunion.engine.session.GameSession``: serializable play state.
"""

from .data.lexicon import Lexicon, LexiconConfig, load_lexicon
from .engine.feedback import calculate_stars, check_win, evaluate
from .engine.generator import GeneratorConfig, PuzzleGenerator, generate
from .engine.grid import GridConfig
from .engine.moves import apply_move
from .engine.session import GameSession, new_session

__all__ = [
    "GameSession",
    "GeneratorConfig",
    "GridConfig",
    "Lexicon",
    "LexiconConfig",
    "PuzzleGenerator",
    "apply_move",
    "calculate_stars",
    "check_win",
    "evaluate",
    "generate",
    "load_lexicon",
    "new_session",
]

__version__ = "0.1.0"
