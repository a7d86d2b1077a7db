"""Bot configuration — Telegram credentials loaded from the environment.

Values come from real environment variables first, then from a ``.env`` file
(python-dotenv never overrides variables that are already set). A missing or
placeholder token simply disables notifications.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from tapgame.notifier import TelegramUser

PLACEHOLDER_TOKEN = "YOUR_BOT_TOKEN_HERE"
DEFAULT_REQUEST_TIMEOUT_S = 30

ENV_TOKEN = "TAPGAME_BOT_TOKEN"
ENV_CHAT_ID = "TAPGAME_CHAT_ID"
ENV_USERNAME = "TAPGAME_BOT_USERNAME"
ENV_TIMEOUT = "TAPGAME_REQUEST_TIMEOUT"
ENV_PLAYER_NAME = "TAPGAME_PLAYER_NAME"


@dataclass(frozen=True)
class BotSettings:
    """Everything the notifier needs to reach a player."""

    token: str = ""
    chat_id: str = ""
    username: str = ""
    request_timeout_s: int = DEFAULT_REQUEST_TIMEOUT_S
    player: TelegramUser | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.token) and self.token != PLACEHOLDER_TOKEN and bool(self.chat_id)


def load_settings(env_file: str | Path | None = None) -> BotSettings:
    """Read bot settings from the environment (and an optional .env file)."""
    if env_file is None:
        # Look beside the player, not beside the installed package
        env_file = find_dotenv(usecwd=True)
    load_dotenv(env_file, override=False)

    raw_timeout = os.environ.get(ENV_TIMEOUT, "").strip()
    if raw_timeout:
        try:
            timeout = int(raw_timeout)
        except ValueError:
            raise ValueError(f"{ENV_TIMEOUT} must be a whole number of seconds, got {raw_timeout!r}") from None
    else:
        timeout = DEFAULT_REQUEST_TIMEOUT_S

    chat_id = os.environ.get(ENV_CHAT_ID, "").strip()
    player_name = os.environ.get(ENV_PLAYER_NAME, "").strip()
    player = None
    if chat_id:
        player = TelegramUser(
            id=int(chat_id) if chat_id.lstrip("-").isdigit() else None,
            first_name=player_name or None,
        )

    return BotSettings(
        token=os.environ.get(ENV_TOKEN, "").strip(),
        chat_id=chat_id,
        username=os.environ.get(ENV_USERNAME, "").strip(),
        request_timeout_s=timeout,
        player=player,
    )
