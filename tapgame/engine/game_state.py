"""Game state — single source of truth for one player session."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from tapgame.engine.events import GameEvent


@dataclass
class RunStats:
    """Informational counters for the current session. Never feed back into the economy."""

    total_taps: int = 0
    tickets_bought: int = 0
    quests_completed: int = 0
    total_coins_earned: int = 0
    total_coins_spent: int = 0
    prizes_won: list[str] = field(default_factory=list)
    session_start_time: float = field(default_factory=time.time)

    @property
    def session_duration_s(self) -> float:
        return time.time() - self.session_start_time


@dataclass
class GameState:
    """Complete mutable state for one session.

    Build it with ``economy.new_game`` so quests and levels start from the
    variant's base values.
    """

    variant_id: str = "quest"

    # ── Currency ─────────────────────────────────────────
    coins: int = 0

    # ── Quests: id → completed ───────────────────────────
    quest_flags: dict[str, bool] = field(default_factory=dict)

    # ── Upgrades: kind id → current level ────────────────
    upgrade_levels: dict[str, int] = field(default_factory=dict)

    # ── Derived / caches (recomputed after every purchase) ─
    character_level: int = 1
    coins_per_click: int = 1
    coins_per_second: int = 0

    # ── Stats ────────────────────────────────────────────
    stats: RunStats = field(default_factory=RunStats)

    # ── Outbox of domain events, drained by the caller ───
    pending_events: list[GameEvent] = field(default_factory=list)

    def earn(self, amount: int) -> None:
        """Credit coins and the lifetime earned counter."""
        self.coins += amount
        self.stats.total_coins_earned += amount
