##
## QuizMind - chat runtime for the Champion Quiz
## discord.py :: Bot Runner for Discord
##
#
# Adapted from OwlMind, Copyright (c) 2024, The Generative Intelligence Lab @ FAU
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#

import re
import logging
import datetime
import discord
from .base import BotMessage, BotEngine

logger = logging.getLogger(__name__)

MAX_MESSAGE_LEN = 2000


def chunk(text: str, max_len: int = MAX_MESSAGE_LEN):
    """Split a response into Discord-sized pieces."""
    return [text[i:i + max_len] for i in range(0, len(text), max_len)]


class LiveStatus:
    """
    Tick callback that keeps one posted status message up to date.
    The message is attached after it has been sent.
    """

    def __init__(self):
        self.message = None

    async def __call__(self, source):
        if self.message is not None:
            await self.message.edit(content=source.status_line())


class DiscordBot(discord.Client):
    """
    DiscordBot connects a Discord channel to a BotEngine: every accepted message becomes a
    BotMessage, the engine fills in `.response` (and optionally a live `.status` line),
    and the bot posts them back to the channel.
    """

    def __init__(self, token, engine: BotEngine, promiscuous: bool = False, debug: bool = False):
        self.token = token
        self.promiscuous = promiscuous
        self.debug = debug
        self.engine = engine
        if self.engine:
            self.engine.debug = debug

        # Discord intents
        intents = discord.Intents.default()
        intents.messages = True
        intents.message_content = True

        super().__init__(intents=intents)

    async def on_ready(self):
        logger.info('Bot is running as: %s.', self.user.name)
        if self.debug:
            logger.info('Debug is on!')
        if self.engine:
            logger.info('Bot is connected to %s(%s).', self.engine.__class__.__name__, self.engine.id)
            if self.engine.announcement:
                logger.info(self.engine.announcement)

    def accepts(self, message) -> bool:
        # Only process user messages (DMs or mentions, unless promiscuous)
        if message.author == self.user or message.author.bot:
            return False
        if self.promiscuous:
            return True
        return self.user in message.mentions or isinstance(message.channel, discord.DMChannel)

    def build_context(self, message, text: str) -> BotMessage:
        return BotMessage(
            channel_id   = message.channel.id,
            server_name  = message.guild.name      if message.guild else '#dm',
            channel_name = message.channel.name    if hasattr(message.channel, 'name') else '#dm',
            author_name  = message.author.name,
            timestamp    = datetime.datetime.now(),
            message      = text,
            on_tick      = LiveStatus(),
        )

    async def on_message(self, message):
        if not self.accepts(message):
            if self.debug:
                logger.debug('IGNORING: orig=%s, dest=%s', message.author.name, self.user)
            return

        # Strip out any @mention tags
        text = re.sub(r"<@!?\d+>", "", message.content).strip()
        if not text:
            return

        context = self.build_context(message, text)
        if self.debug:
            logger.debug('PROCESSING: ctx=%s', context)

        if self.engine:
            await self.engine.process(context)

        if context.response:
            for piece in chunk(str(context.response)):
                await message.channel.send(piece)

        if context.status:
            status_message = await message.channel.send(context.status)
            context['on_tick'].message = status_message
        return

    def run(self):
        super().run(self.token)
