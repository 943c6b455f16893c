# quiz_engine.py

import logging
import re
from typing import Dict, Sequence

import game_state
from catalog import Champion, display_order
from game_state import Difficulty, Status
from quiz_manager import QuizManager
from quizmind.base import BotEngine, BotMessage
from session_manager import SessionManager

logger = logging.getLogger(__name__)

# One message may carry several guesses, one per line or comma-separated
_GUESS_SPLIT = re.compile(r"[,\n]")


class QuizEngine(BotEngine):
    """
    QuizEngine turns chat messages into quiz actions. Each channel gets its own
    SessionManager; slash commands drive the game and any other text is a guess.
    """

    VERSION = "1.0"

    def __init__(self, id, catalog: Sequence[Champion], model_provider=None,
                 tick_seconds: float = 1.0, oracle=None):
        super().__init__(id)
        self.catalog = tuple(catalog)
        self.board_order = display_order(self.catalog)
        self.tick_seconds = tick_seconds
        self.oracle = oracle
        self.model_provider = model_provider
        if model_provider is not None:
            QuizManager.initialize(model_provider)
        self.tables: Dict[object, SessionManager] = {}
        self.announcement = f'QuizEngine {self.id} loaded {len(self.catalog)} champions.'

    def table(self, channel_id) -> SessionManager:
        if channel_id not in self.tables:
            self.tables[channel_id] = SessionManager(
                self.catalog, oracle=self.oracle, tick_seconds=self.tick_seconds
            )
        return self.tables[channel_id]

    def drop_table(self, channel_id):
        """Forget a channel's table; the next message there starts from the menu."""
        table = self.tables.pop(channel_id, None)
        if table is not None:
            table.reset()

    def reset(self):
        for table in self.tables.values():
            table.reset()
        self.tables.clear()

    # --- Rendering helpers ---

    def render_board(self, table: SessionManager) -> str:
        session = table.session
        cells = []
        for champ in self.board_order:
            if champ.id in session.guessed_ids:
                cells.append(f"✅ {champ.name}")
            elif game_state.is_revealed(champ, session):
                cells.append(f"🔒 {champ.name}")
            else:
                cells.append(f"▫️ {game_state.hint_glyph(champ, session) or '?'}")
        return f"**Board** ({table.guessed_count} / {table.total})\n" + " · ".join(cells)

    def render_stats(self, table: SessionManager) -> str:
        session = table.session
        lines = [
            "**Champion Quiz**",
            f"• Status: {session.status.value}   Mode: {session.difficulty.value}",
            f"• Guessed: {table.guessed_count} / {table.total} ({table.percentage}%)",
            f"• Time: {game_state.format_time(table.elapsed)}",
        ]
        if session.status is Status.FINISHED:
            lines.append(f"• Final score: {table.percentage}% - {game_state.verdict(table.percentage)}")
        return "\n".join(lines)

    def render_final(self, table: SessionManager) -> str:
        session = table.session
        headline = "🏳️ You gave up." if session.gave_up else "🏆 Every champion named!"
        return (
            f"{headline}\n"
            f"Final score: **{table.percentage}%** ({table.guessed_count} / {table.total}) "
            f"in {game_state.format_time(table.elapsed)}. {game_state.verdict(table.percentage)}\n"
            "Send `/reset` to go back to the menu."
        )

    # --- Commands ---

    async def process(self, context: BotMessage):
        msg = context['message'].strip()
        lowered = msg.lower()
        table = self.table(context['channel_id'])

        if lowered == '/help':
            context.response = (
                f'### Champion Quiz v{self.VERSION}\n'
                '* `/start [normal|hard]`: new game (normal shows initials)\n'
                '* `/hint`: ask the oracle about a champion you are missing\n'
                '* `/hint close`: hide the hint\n'
                '* `/board`: show the board\n'
                '* `/stats`: score and time\n'
                '* `/giveup`: end the game and reveal everything\n'
                '* `/reset`: back to the menu\n'
                'Anything else is a guess. Apostrophes and spaces are optional: "Kaisa" counts as "Kai\'Sa".'
            )

        elif lowered.startswith('/start'):
            arg = lowered[len('/start'):].strip() or Difficulty.NORMAL.value
            if arg not in (Difficulty.NORMAL.value, Difficulty.HARD.value):
                context.response = "Pick a mode: `/start normal` or `/start hard`."
            elif table.session.status is Status.PLAYING:
                context.response = "A game is already running here. `/giveup` first to start over."
            else:
                table.start(Difficulty(arg), on_tick=context.get('on_tick'))
                context.response = (
                    f"🎮 **{arg.capitalize()} mode**: name all {table.total} champions! "
                    "Just type names in this channel."
                )
                context.status = table.status_line()

        elif lowered == '/giveup':
            if table.session.status is Status.PLAYING:
                table.give_up()
                context.response = self.render_final(table) + "\n\n" + self.render_board(table)
            else:
                context.response = "There is no game running. Try `/start`."

        elif lowered == '/hint close':
            table.hints.close()
            context.response = "Hint hidden."

        elif lowered == '/hint':
            if table.session.status is not Status.PLAYING:
                context.response = "Hints are only available during a game."
            elif table.hints.state.loading:
                context.response = "🔮 Consulting the stars..."
            else:
                text = await table.request_hint()
                if text is not None:
                    context.response = f'✨ **Oracle hint**: "{text}"'

        elif lowered == '/board':
            context.response = self.render_board(table)

        elif lowered == '/stats':
            context.response = self.render_stats(table)

        elif lowered == '/reset':
            self.drop_table(context['channel_id'])
            context.response = "Back at the menu. `/start normal` or `/start hard` when ready."

        elif self.is_command(msg):
            context.response = "Unknown command. Try `/help`."

        elif table.session.status is Status.PLAYING:
            hits = []
            for piece in _GUESS_SPLIT.split(msg):
                champ = table.guess(piece)
                if champ is not None:
                    hits.append(champ.name)
            if hits:
                context.response = "✅ " + ", ".join(hits) + f" ({table.guessed_count} / {table.total})"
                if table.session.status is Status.FINISHED:
                    context.response += "\n" + self.render_final(table)

        if self.debug:
            logger.debug("QuizEngine: channel=%s message=%r response=%r",
                         context['channel_id'], msg, context.response)
        return
