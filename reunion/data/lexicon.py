"""Length-bucketed word lexicon and its loaders."""

from __future__ import annotations

import os
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple

import requests

from ..core.constants import MAX_WORD_LENGTH, MIN_SLOT_LENGTH
from ..utils.logger import get_logger
from .normalization import clean_word


LOGGER = get_logger(__name__)

DEFAULT_LEXICON_URL = (
    "https://raw.githubusercontent.com/first20hours/google-10000-english/"
    "master/google-10000-english.txt"
)
LEXICON_URL_ENV = "REUNION_LEXICON_URL"


@dataclass
class LexiconConfig:
    """Configuration for lexicon filtering and loading."""

    min_length: int = MIN_SLOT_LENGTH
    max_length: int = MAX_WORD_LENGTH
    timeout_seconds: float = 15.0


class Lexicon:
    """Immutable set of valid words indexed by length and letter position."""

    def __init__(self, words: Iterable[str] = (), config: Optional[LexiconConfig] = None) -> None:
        self.config = config or LexiconConfig()
        self._words_by_length: Dict[int, Set[str]] = defaultdict(set)
        # Positional index: length -> (position, letter) -> set of words
        self._position_index: Dict[int, Dict[Tuple[int, str], Set[str]]] = defaultdict(
            lambda: defaultdict(set)
        )
        self._frozen: Dict[int, FrozenSet[str]] = {}
        self._hydrate(words)

    def _hydrate(self, words: Iterable[str]) -> None:
        for raw in words:
            word = clean_word(raw)
            if not word:
                continue
            if len(word) < self.config.min_length or len(word) > self.config.max_length:
                continue
            bucket = self._words_by_length[len(word)]
            if word in bucket:
                continue
            bucket.add(word)
            length_index = self._position_index[len(word)]
            for pos, char in enumerate(word):
                length_index[(pos, char)].add(word)
        self._frozen = {length: frozenset(bucket) for length, bucket in self._words_by_length.items()}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._frozen.values())

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    def lengths(self) -> List[int]:
        return sorted(self._frozen)

    def contains(self, word: str) -> bool:
        cleaned = clean_word(word)
        return cleaned in self._frozen.get(len(cleaned), frozenset())

    def words_of_length(self, length: int) -> FrozenSet[str]:
        return self._frozen.get(length, frozenset())

    def find_candidates(
        self,
        length: int,
        pattern: Optional[Sequence[Optional[str]]] = None,
    ) -> List[str]:
        """Return words of ``length`` matching ``pattern`` position for position.

        ``pattern`` holds a letter or ``None`` (wildcard) per cell, so this is
        the same as an anchored fixed-length regular expression. The result is
        sorted so that callers shuffling with a seeded RNG get reproducible
        orderings.
        """

        if pattern is not None and len(pattern) != length:
            return []
        return sorted(self._index_lookup(length, pattern))

    def _index_lookup(
        self,
        length: int,
        pattern: Optional[Sequence[Optional[str]]],
    ) -> Set[str]:
        length_index = self._position_index.get(length)
        if not length_index:
            return set()

        constraints: List[Set[str]] = []
        for pos, letter in enumerate(pattern or ()):
            if letter is None:
                continue
            match_set = length_index.get((pos, letter))
            if match_set is None:
                return set()
            constraints.append(match_set)

        if not constraints:
            return set(self._frozen.get(length, frozenset()))

        # Intersect smallest sets first
        constraints.sort(key=len)
        result = set(constraints[0])
        for other in constraints[1:]:
            result &= other
            if not result:
                break
        return result


# ----------------------------------------------------------------------
# Loaders
# ----------------------------------------------------------------------
def parse_words(text: str) -> List[str]:
    """Split a plain word list, one entry per line. Blank lines and # comments are skipped."""
    entries: List[str] = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        entries.append(line)
    return entries


def load_words_file(path: Path | str) -> List[str]:
    return parse_words(Path(path).read_text(encoding="utf-8"))


def fetch_words(url: str, timeout: float = 15.0) -> List[str]:
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return parse_words(response.text)


def default_source() -> str:
    return os.environ.get(LEXICON_URL_ENV, DEFAULT_LEXICON_URL)


def load_lexicon(source: Path | str | None = None, config: Optional[LexiconConfig] = None) -> Lexicon:
    """Load a lexicon from a file path or an ``http(s)`` URL.

    A source that cannot be read produces an empty lexicon; generation then
    fails with :class:`DictionaryUnavailableError` instead of the loader
    crashing the caller.
    """

    config = config or LexiconConfig()
    source = default_source() if source is None else source
    text_source = str(source)
    try:
        if text_source.startswith(("http://", "https://")):
            words = fetch_words(text_source, timeout=config.timeout_seconds)
        else:
            words = load_words_file(text_source)
    except (OSError, requests.RequestException, UnicodeDecodeError) as exc:
        LOGGER.warning("Failed to load dictionary from %s: %s", text_source, exc)
        return Lexicon((), config)

    lexicon = Lexicon(words, config)
    LOGGER.info("Dictionary loaded: %d words from %s", len(lexicon), text_source)
    return lexicon


__all__ = [
    "DEFAULT_LEXICON_URL",
    "Lexicon",
    "LexiconConfig",
    "fetch_words",
    "load_lexicon",
    "load_words_file",
    "parse_words",
]
