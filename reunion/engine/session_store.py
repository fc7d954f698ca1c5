"""JSON file stores for saved sessions and win statistics.

The engine treats saved state as opaque: it exports and imports the
session document verbatim and never repairs a malformed one.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.constants import DEFAULT_STATE_KEY
from ..core.exceptions import CorruptedStateError, ReunionError
from ..data.lexicon import Lexicon
from ..utils.logger import get_logger
from .generator import GeneratorConfig
from .grid import GridConfig
from .session import GameSession, new_session


LOGGER = get_logger(__name__)

DEFAULT_STORE_DIR = Path("local_db/reunion")


class SessionStore:
    """Persist session documents as ``<key>.json`` files."""

    def __init__(self, store_dir: Path | str = DEFAULT_STORE_DIR) -> None:
        self.store_dir = Path(store_dir)
        self.store_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str = DEFAULT_STATE_KEY) -> Path:
        return self.store_dir / f"{key}.json"

    def save(self, state: Dict[str, Any], key: str = DEFAULT_STATE_KEY) -> Path:
        path = self.path_for(key)
        doc = {"saved_at": datetime.now(timezone.utc).isoformat(), "state": state}
        path.write_text(json.dumps(doc, ensure_ascii=False, indent=2), encoding="utf-8")
        LOGGER.debug("Session saved: %s", path)
        return path

    def load(self, key: str = DEFAULT_STATE_KEY) -> Optional[Any]:
        """Return the stored state, or ``None`` when missing or unreadable."""
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            doc = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
            LOGGER.warning("Session read error (%s): %s", path.name, exc)
            return None
        if not isinstance(doc, dict):
            LOGGER.warning("Session document %s is not an object", path.name)
            return None
        return doc.get("state")

    def clear(self, key: str = DEFAULT_STATE_KEY) -> None:
        self.path_for(key).unlink(missing_ok=True)


@dataclass
class GameStats:
    solved: int = 0
    total_moves: int = 0
    streak: int = 0

    @property
    def average_moves(self) -> float:
        return self.total_moves / self.solved if self.solved else 0.0


class StatsStore:
    """Win statistics kept in a single JSON file."""

    def __init__(self, path: Path | str = DEFAULT_STORE_DIR / "reunion_stats.json") -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def snapshot(self) -> GameStats:
        if not self.path.exists():
            return GameStats()
        try:
            doc = json.loads(self.path.read_text(encoding="utf-8"))
            return GameStats(
                solved=int(doc.get("solved", 0)),
                total_moves=int(doc.get("total_moves", 0)),
                streak=int(doc.get("streak", 0)),
            )
        except (json.JSONDecodeError, OSError, AttributeError, TypeError, ValueError) as exc:
            LOGGER.warning("Stats read error (%s): %s", self.path.name, exc)
            return GameStats()

    def record(self, move_count: int, did_win: bool) -> None:
        if not did_win:
            return
        stats = self.snapshot()
        stats.solved += 1
        stats.total_moves += move_count
        stats.streak += 1
        self.path.write_text(json.dumps(asdict(stats), indent=2), encoding="utf-8")
        LOGGER.info("Recorded win in %d moves (%d solved)", move_count, stats.solved)


def load_session(
    store: SessionStore,
    key: str = DEFAULT_STATE_KEY,
    grid_config: Optional[GridConfig] = None,
) -> Optional[GameSession]:
    """Return the saved session, or ``None`` when it is missing or corrupted."""

    state = store.load(key)
    if state is None:
        return None
    try:
        return GameSession.from_jsonable(state, grid_config=grid_config)
    except CorruptedStateError as exc:
        LOGGER.warning("Discarding saved session: %s", exc)
        return None


def resume_or_create(
    store: SessionStore,
    lexicon: Lexicon,
    config: Optional[GeneratorConfig] = None,
    key: str = DEFAULT_STATE_KEY,
    fresh: bool = False,
) -> Optional[GameSession]:
    """Resume the saved session or generate a new one.

    Corrupted state is treated as absent. When generation fails the error is
    logged, ``None`` is returned, and whatever was stored stays untouched.
    """

    config = config or GeneratorConfig()
    if not fresh:
        session = load_session(store, key, config.grid)
        if session is not None:
            return session

    try:
        session = new_session(lexicon, config)
    except ReunionError as exc:
        message = getattr(exc, "user_message", "Cannot build a puzzle.")
        LOGGER.error("%s (%s)", message, exc)
        return None
    store.save(session.to_jsonable(), key)
    return session
