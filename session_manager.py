# session_manager.py

import asyncio
import inspect
import logging
import time
from typing import Callable, Optional, Sequence

import game_state
from catalog import Champion
from game_state import Difficulty, Session, Status
from hint_manager import HintManager

logger = logging.getLogger(__name__)


class Ticker:
    """Periodic asyncio task that refreshes the elapsed-time display of one game."""

    def __init__(self, interval: float = 1.0):
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, manager: "SessionManager", on_tick: Callable):
        self.stop()
        self._task = asyncio.create_task(self._run(manager, manager.session.game_id, on_tick))

    def stop(self):
        if self._task is not None:
            if not self._task.done():
                self._task.cancel()
            self._task = None

    async def _run(self, manager: "SessionManager", game_id: str, on_tick: Callable):
        while True:
            await asyncio.sleep(self.interval)
            session = manager.session
            if session.game_id != game_id or session.status is not Status.PLAYING:
                return
            try:
                result = on_tick(manager)
                if inspect.isawaitable(result):
                    await result
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning("⚠️ Tick callback failed for game %s: %s", game_id, e)


class SessionManager:
    """
    Owns the Session of one table (a chat channel) and replaces it on every
    transition. Also owns the ticker and the hint panel of that table.
    """

    def __init__(self, catalog: Sequence[Champion], oracle: Optional[Callable] = None,
                 tick_seconds: float = 1.0, rng=None, clock: Callable[[], float] = time.time):
        self.catalog = tuple(catalog)
        self.clock = clock
        self.session: Session = game_state.new_session()
        self.hints = HintManager(self.catalog, oracle, rng)
        self.ticker = Ticker(tick_seconds)

    def _replace(self, session: Session) -> Session:
        self.session = session
        if session.status is not Status.PLAYING:
            self.ticker.stop()
        return session

    def start(self, difficulty=Difficulty.NORMAL, on_tick: Optional[Callable] = None) -> Session:
        before = self.session
        session = game_state.start(before, difficulty, now=self.clock())
        if session is before:
            return session
        self.hints.clear()
        self._replace(session)
        if on_tick is not None:
            self.ticker.start(self, on_tick)
        return session

    def guess(self, raw_input: str) -> Optional[Champion]:
        session, champ = game_state.submit_guess(self.session, raw_input, self.catalog, now=self.clock())
        if champ is not None:
            self._replace(session)
        return champ

    def give_up(self) -> Session:
        return self._replace(game_state.give_up(self.session, now=self.clock()))

    def reset(self) -> Session:
        self.hints.clear()
        return self._replace(game_state.reset(self.session))

    async def request_hint(self) -> Optional[str]:
        return await self.hints.request(lambda: self.session)

    @property
    def total(self) -> int:
        return len(self.catalog)

    @property
    def guessed_count(self) -> int:
        return len(self.session.guessed_ids)

    @property
    def percentage(self) -> int:
        return game_state.completion_percentage(self.session, self.total)

    @property
    def elapsed(self) -> int:
        return game_state.elapsed_seconds(self.session, now=self.clock())

    def status_line(self) -> str:
        return f"{self.guessed_count} / {self.total} · {game_state.format_time(self.elapsed)}"
