"""Telegram notifier — best-effort delivery of game events to a chat.

The notifier consumes events drained from the game state; it never reads or
writes the state itself, and a failed send is logged and reported as
``False`` rather than raised.
"""

from __future__ import annotations

import asyncio
import html
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable

from aiogram import Bot
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramAPIError
from aiogram.utils.token import TokenValidationError

from tapgame.engine.events import GameEvent, LevelUp, PrizeWon, QuestCompleted, describe

if TYPE_CHECKING:
    from tapgame.config import BotSettings

logger = logging.getLogger(__name__)


@dataclass
class TelegramUser:
    """The player on the Telegram side of the notification."""

    id: int | None = None
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    language_code: str | None = None

    @property
    def full_name(self) -> str:
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        if self.first_name:
            return self.first_name
        if self.username:
            return f"@{self.username}"
        return f"User {self.id}" if self.id is not None else "User"

    @property
    def display_name(self) -> str:
        if self.first_name:
            return self.first_name
        if self.username:
            return f"@{self.username}"
        return "Player"


def format_message(event: GameEvent, user: TelegramUser | None = None) -> str:
    """Render an event as an HTML Telegram message."""
    greeting = f"{html.escape(user.display_name)}, " if user is not None else ""

    if isinstance(event, QuestCompleted):
        return (
            f"🎯 <b>{greeting}quest complete!</b>\n\n"
            f"📋 Task: {html.escape(event.quest_name)}\n"
            f"💰 Reward: {event.reward} coins\n\n"
            "Keep playing! 🚀"
        )
    if isinstance(event, LevelUp):
        return (
            f"🎉 <b>{greeting}congratulations!</b>\n\n"
            f"⚡ Your character reached <b>level {event.new_level}</b>!\n\n"
            "Bigger rewards are waiting for you! 🚀"
        )
    if isinstance(event, PrizeWon):
        return (
            f"🎁 <b>{greeting}you won a prize!</b>\n\n"
            f"🏆 Prize: <b>{html.escape(event.prize_name)}</b>\n\n"
            "Contact the administrator to collect it! 📞"
        )
    raise TypeError(f"Not a game event: {event!r}")


class TelegramNotifier:
    """Sends game events to the configured chat through the Bot API."""

    _SEND_ERRORS = (TelegramAPIError, TokenValidationError, asyncio.TimeoutError, OSError)

    def __init__(
        self,
        settings: BotSettings,
        bot_factory: Callable[[], Bot] | None = None,
    ) -> None:
        self._settings = settings
        self._bot_factory = bot_factory or self._default_bot

    @property
    def enabled(self) -> bool:
        return self._settings.is_configured

    def _default_bot(self) -> Bot:
        # A fresh bot (and HTTP session) per delivery keeps the notifier usable
        # from any event loop: textual's, or a throwaway one in the web edition.
        return Bot(
            token=self._settings.token,
            default=DefaultBotProperties(parse_mode=ParseMode.HTML),
        )

    async def deliver(self, event: GameEvent) -> bool:
        """Try to send one event. Returns True only if Telegram accepted it."""
        if not self.enabled:
            logger.info("Notification not sent (bot token not configured): %s", describe(event))
            return False

        text = format_message(event, self._settings.player)
        try:
            async with self._bot_factory() as bot:
                await bot.send_message(
                    chat_id=self._settings.chat_id,
                    text=text,
                    request_timeout=self._settings.request_timeout_s,
                )
        except self._SEND_ERRORS as exc:
            logger.warning("Failed to send notification %r: %s", describe(event), exc)
            return False

        logger.info("Notification sent: %s", describe(event))
        return True

    async def deliver_all(self, events: Iterable[GameEvent]) -> int:
        """Send events one after another. Returns how many were delivered."""
        delivered = 0
        for event in events:
            if await self.deliver(event):
                delivered += 1
        return delivered

    async def bot_info(self) -> str | None:
        """Bot username as reported by getMe, or None if unreachable."""
        if not self.enabled:
            return None
        try:
            async with self._bot_factory() as bot:
                me = await bot.get_me(request_timeout=self._settings.request_timeout_s)
        except self._SEND_ERRORS as exc:
            logger.warning("Could not fetch bot info: %s", exc)
            return None
        return me.username

    async def is_available(self) -> bool:
        return await self.bot_info() is not None
