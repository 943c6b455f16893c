# hint_manager.py

import asyncio
import inspect
import logging
import random
from dataclasses import dataclass, replace
from typing import Callable, Optional, Sequence

from catalog import Champion
from game_state import Session
from quiz_manager import QuizManager

logger = logging.getLogger(__name__)


def select_hint_target(session: Session, catalog: Sequence[Champion], rng=random) -> Optional[Champion]:
    """
    Pick a champion the player has not guessed yet, uniformly at random.
    Returns None when everything has been guessed.
    """
    unguessed = [c for c in catalog if c.id not in session.guessed_ids]
    if not unguessed:
        return None
    return rng.choice(unguessed)


@dataclass(frozen=True)
class HintState:
    text: str = ""
    visible: bool = False
    loading: bool = False


class HintManager:
    """
    Runs one hint request at a time against the oracle and keeps the hint panel state.
    Results that arrive after the game they were asked for has ended or been
    replaced are dropped.
    """

    def __init__(self, catalog: Sequence[Champion], oracle: Optional[Callable] = None, rng=None):
        self.catalog = catalog
        self.oracle = oracle or QuizManager.get_hint
        self.rng = rng or random
        self.state = HintState()
        self._generation = 0

    async def _ask(self, champion: Champion) -> str:
        if inspect.iscoroutinefunction(self.oracle):
            return await self.oracle(champion)
        # Blocking HTTP call; keep the event loop free for guesses
        return await asyncio.to_thread(self.oracle, champion)

    async def request(self, current_session: Callable[[], Session]) -> Optional[str]:
        """
        Ask for a hint about a random unguessed champion of the current game.
        Returns the hint text, or None when the request was skipped or went stale.
        """
        if self.state.loading:
            logger.debug("Hint already in flight, ignoring request")
            return None

        session = current_session()
        if not session.is_playing:
            return None
        target = select_hint_target(session, self.catalog, self.rng)
        if target is None:
            return None

        self._generation += 1
        generation = self._generation
        self.state = HintState(loading=True, visible=True)
        logger.debug("💡 Hint requested for game %s", session.game_id)

        try:
            text = await self._ask(target)
        finally:
            if generation == self._generation and self.state.loading:
                self.state = replace(self.state, loading=False)

        latest = current_session()
        if generation != self._generation or latest.game_id != session.game_id or not latest.is_playing:
            logger.debug("🗑️ Discarding stale hint for game %s", session.game_id)
            if generation == self._generation:
                self.state = HintState()
            return None

        self.state = HintState(text=text, visible=True, loading=False)
        return text

    def close(self):
        self.state = replace(self.state, visible=False)

    def clear(self):
        # Anything still in flight becomes stale
        self._generation += 1
        self.state = HintState()
