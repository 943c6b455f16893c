"""Quiz session state and its transitions.

Every transition returns a new Session value; nothing here mutates in place.
Time is passed in as `now` (epoch seconds) so transitions stay deterministic;
it falls back to the wall clock when omitted.

Illegal calls (guessing before start, giving up twice, ...) return the
session unchanged instead of raising.
"""

import logging
import math
import time
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import FrozenSet, Optional, Sequence, Tuple

from catalog import Champion
from quiz_manager import QuizManager

logger = logging.getLogger(__name__)


class Status(str, Enum):
    MENU = "menu"
    PLAYING = "playing"
    FINISHED = "finished"


class Difficulty(str, Enum):
    NORMAL = "normal"
    HARD = "hard"


@dataclass(frozen=True)
class Session:
    guessed_ids: FrozenSet[str] = field(default_factory=frozenset)
    status: Status = Status.MENU
    difficulty: Difficulty = Difficulty.NORMAL
    started_at: Optional[float] = None
    ended_at: Optional[float] = None
    gave_up: bool = False
    # Same for every value derived from one start(); used to spot stale async results
    game_id: Optional[str] = None

    @property
    def is_playing(self) -> bool:
        return self.status is Status.PLAYING


def _now(now: Optional[float]) -> float:
    return time.time() if now is None else now


def new_session() -> Session:
    return Session()


def start(session: Session, difficulty=Difficulty.NORMAL, now: Optional[float] = None) -> Session:
    """Begin a fresh game from the menu or a finished game."""
    if session.status is Status.PLAYING:
        logger.debug("start() ignored, game %s already playing", session.game_id)
        return session
    started = Session(
        status=Status.PLAYING,
        difficulty=Difficulty(difficulty),
        started_at=_now(now),
        game_id=uuid.uuid4().hex,
    )
    logger.debug("🎮 Game %s started (%s)", started.game_id, started.difficulty.value)
    return started


def submit_guess(session: Session, raw_input: str, catalog: Sequence[Champion],
                 now: Optional[float] = None) -> Tuple[Session, Optional[Champion]]:
    """
    Apply one raw input to the session.
    Returns (session, champion) where champion is set only when a new id was recorded.
    """
    if session.status is not Status.PLAYING:
        return session, None

    key = QuizManager.normalize(raw_input)
    if not key:
        return session, None

    champ = QuizManager.match(key, catalog)
    if champ is None or champ.id in session.guessed_ids:
        return session, None

    guessed = session.guessed_ids | {champ.id}
    if len(guessed) == len(catalog):
        logger.debug("🏆 Game %s completed", session.game_id)
        return replace(session, guessed_ids=guessed, status=Status.FINISHED,
                       ended_at=_now(now), gave_up=False), champ
    return replace(session, guessed_ids=guessed), champ


def give_up(session: Session, now: Optional[float] = None) -> Session:
    if session.status is not Status.PLAYING:
        return session
    logger.debug("🏳️ Game %s given up with %d guessed", session.game_id, len(session.guessed_ids))
    return replace(session, status=Status.FINISHED, ended_at=_now(now), gave_up=True)


def reset(session: Session) -> Session:
    """Back to the menu ("play again")."""
    return new_session()


def completion_percentage(session: Session, catalog_size: int) -> int:
    """Guessed share rounded half up to a whole percent; 0 for an empty catalog."""
    if catalog_size <= 0:
        return 0
    return (200 * len(session.guessed_ids) + catalog_size) // (2 * catalog_size)


def verdict(percentage: int) -> str:
    if percentage >= 100:
        return "LEGENDARY!"
    return "Better luck next time!"


# --- Reveal policy ---

def is_revealed(champion: Champion, session: Session) -> bool:
    return champion.id in session.guessed_ids or session.gave_up


def hint_glyph(champion: Champion, session: Session) -> Optional[str]:
    """First letter of the name for hidden champions in normal mode, otherwise None."""
    if is_revealed(champion, session) or session.difficulty is not Difficulty.NORMAL:
        return None
    return champion.name[:1] or None


# --- Clock ---

def elapsed_seconds(session: Session, now: Optional[float] = None) -> int:
    if session.started_at is None:
        return 0
    if session.status is Status.FINISHED and session.ended_at is not None:
        end = session.ended_at
    elif session.status is Status.PLAYING:
        end = _now(now)
    else:
        return 0
    return max(0, math.floor(end - session.started_at))


def format_time(seconds: int) -> str:
    mins, secs = divmod(int(seconds), 60)
    return f"{mins}:{secs:02d}"
