"""Upgrade and quest definitions — everything a player can buy or complete."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum, auto

from tapgame.data.balance import BALANCE


class UpgradeKind(Enum):
    """Purchasable items. The value is the stable id used by the UI and web API."""

    TICKET = "ticket"
    SPEED = "speed"
    REWARD = "reward"
    CLICK_POWER = "click_power"
    AUTO_CLICKER = "auto_clicker"

    @classmethod
    def from_id(cls, kind_id: str) -> UpgradeKind:
        try:
            return cls(kind_id)
        except ValueError:
            raise ValueError(f"Unknown upgrade kind: {kind_id!r}") from None


class CostCurve(Enum):
    """How the price of the next level grows."""

    FLAT = auto()         # Constant price (no level)
    LINEAR = auto()       # base_cost * level
    GEOMETRIC = auto()    # base_cost * growth ^ (level - level_offset)


@dataclass(frozen=True)
class UpgradeDef:
    """Definition of a single purchasable item."""

    kind: UpgradeKind
    name: str
    description: str
    curve: CostCurve
    base_cost: int
    # Starting level for a fresh game (ignored when levelled is False)
    base_level: int = 1
    growth: float = 1.0
    level_offset: int = 0
    # Tickets have no level; buying one bumps a counter instead
    levelled: bool = True

    @property
    def id(self) -> str:
        return self.kind.value

    def cost_at(self, level: int) -> int:
        """Price of buying the next level when currently at ``level``."""
        if self.curve == CostCurve.FLAT:
            return self.base_cost
        if self.curve == CostCurve.LINEAR:
            return self.base_cost * level
        return math.floor(self.base_cost * self.growth ** (level - self.level_offset))


@dataclass(frozen=True)
class QuestDef:
    """A one-time task that pays out once."""

    id: str
    name: str
    description: str


# ── Quest game items ──────────────────────────────────────────────

TICKET = UpgradeDef(
    kind=UpgradeKind.TICKET,
    name="Prize Ticket",
    description="A ticket for the prize draw. Every ticket has a chance to win.",
    curve=CostCurve.FLAT,
    base_cost=BALANCE.quest.ticket_price,
    base_level=0,
    levelled=False,
)

SPEED = UpgradeDef(
    kind=UpgradeKind.SPEED,
    name="Speed Booster",
    description="Finish quests faster. Raises your character level.",
    curve=CostCurve.LINEAR,
    base_cost=BALANCE.quest.speed_base_cost,
)

REWARD = UpgradeDef(
    kind=UpgradeKind.REWARD,
    name="Reward Booster",
    description="Every quest pays out base reward times this level.",
    curve=CostCurve.LINEAR,
    base_cost=BALANCE.quest.reward_base_cost,
)

# ── Goose game items ──────────────────────────────────────────────

CLICK_POWER = UpgradeDef(
    kind=UpgradeKind.CLICK_POWER,
    name="Click Power",
    description="Each tap on the goose earns one more coin.",
    curve=CostCurve.GEOMETRIC,
    base_cost=BALANCE.goose.click_power_base_cost,
    base_level=1,
    growth=BALANCE.goose.cost_growth,
    level_offset=1,
)

AUTO_CLICKER = UpgradeDef(
    kind=UpgradeKind.AUTO_CLICKER,
    name="Auto-Clicker",
    description="A tireless helper taps the goose for you every second.",
    curve=CostCurve.GEOMETRIC,
    base_cost=BALANCE.goose.auto_clicker_base_cost,
    base_level=0,
    growth=BALANCE.goose.cost_growth,
    level_offset=0,
)

# ── Quests ────────────────────────────────────────────────────────

TELEGRAM = QuestDef(
    id="telegram",
    name="Telegram channel",
    description="Subscribe to the Telegram channel.",
)

DZEN = QuestDef(
    id="dzen",
    name="Yandex Zen",
    description="Subscribe to the blog on Yandex Zen.",
)

PORTAL = QuestDef(
    id="portal",
    name="Corporate portal",
    description="Join the corporate portal.",
)

# ── Registries ────────────────────────────────────────────────────

ALL_UPGRADES: dict[UpgradeKind, UpgradeDef] = {
    u.kind: u for u in [TICKET, SPEED, REWARD, CLICK_POWER, AUTO_CLICKER]
}

ALL_QUESTS: dict[str, QuestDef] = {q.id: q for q in [TELEGRAM, DZEN, PORTAL]}
