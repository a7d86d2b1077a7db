"""Game variants — per-game pricing and yield policy behind one model shell.

Both games share the same state and operations (see ``economy``); a variant
only decides which quests and upgrades exist and how levels turn into
coins per click and coins per second.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from tapgame.data.balance import BALANCE
from tapgame.data.upgrades import (
    ALL_QUESTS,
    ALL_UPGRADES,
    QuestDef,
    UpgradeDef,
    UpgradeKind,
)

if TYPE_CHECKING:
    from tapgame.engine.game_state import GameState


@dataclass(frozen=True)
class GameVariant:
    """Strategy object describing one playable game."""

    id: str
    title: str
    subtitle: str
    quests: tuple[QuestDef, ...]
    upgrades: dict[UpgradeKind, UpgradeDef]
    quest_reward_base: int
    # Unknown quest ids count as "not completed yet" instead of being refused
    accepts_unknown_quests: bool
    click_yield: Callable[[GameState], int]
    passive_yield: Callable[[GameState], int]
    # Whether the UI offers a tap target at all
    tappable: bool = False
    character_level_base: int = 1

    def offers(self, kind: UpgradeKind) -> bool:
        return kind in self.upgrades

    def quest(self, quest_id: str) -> QuestDef | None:
        for q in self.quests:
            if q.id == quest_id:
                return q
        return None


def _flat_click(state: GameState) -> int:
    return 1


def _no_passive(state: GameState) -> int:
    return 0


def _click_power_yield(state: GameState) -> int:
    # Linear: one coin per click-power level
    return state.upgrade_levels.get(UpgradeKind.CLICK_POWER.value, 1)


def _auto_clicker_yield(state: GameState) -> int:
    level = state.upgrade_levels.get(UpgradeKind.AUTO_CLICKER.value, 0)
    return level * BALANCE.goose.coins_per_second_per_level


QUEST_GAME = GameVariant(
    id="quest",
    title="Tapalka Alabuga",
    subtitle="Complete quests. Boost your hero. Win prizes.",
    quests=tuple(ALL_QUESTS.values()),
    upgrades={
        k: ALL_UPGRADES[k]
        for k in (UpgradeKind.TICKET, UpgradeKind.SPEED, UpgradeKind.REWARD)
    },
    quest_reward_base=BALANCE.quest.quest_reward_base,
    accepts_unknown_quests=True,
    click_yield=_flat_click,
    passive_yield=_no_passive,
    character_level_base=BALANCE.quest.character_level_base,
)

GOOSE_GAME = GameVariant(
    id="goose",
    title="Goose Tapper",
    subtitle="Tap the goose. Hire auto-clickers. Get rich.",
    quests=(),
    upgrades={
        k: ALL_UPGRADES[k]
        for k in (UpgradeKind.CLICK_POWER, UpgradeKind.AUTO_CLICKER)
    },
    quest_reward_base=BALANCE.quest.quest_reward_base,
    accepts_unknown_quests=False,
    click_yield=_click_power_yield,
    passive_yield=_auto_clicker_yield,
    tappable=True,
)

VARIANTS: dict[str, GameVariant] = {v.id: v for v in [QUEST_GAME, GOOSE_GAME]}


def get_variant(variant_id: str) -> GameVariant:
    """Look up a variant by id, raising KeyError listing the valid ids."""
    try:
        return VARIANTS[variant_id]
    except KeyError:
        valid = ", ".join(sorted(VARIANTS))
        raise KeyError(f"Unknown game variant {variant_id!r} (expected one of: {valid})") from None
