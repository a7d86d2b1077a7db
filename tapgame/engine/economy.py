"""Economy engine — earning, spending, derived rates and number formatting.

Every mutating function either applies completely and reports success or
leaves the state untouched and reports failure. Nothing here raises for an
unaffordable purchase or a repeated quest.
"""

from __future__ import annotations

import math
import random

from tapgame.data.balance import BALANCE
from tapgame.data.upgrades import UpgradeKind
from tapgame.engine.events import LevelUp, PrizeWon, QuestCompleted
from tapgame.engine.game_state import GameState
from tapgame.engine.variants import GameVariant, get_variant


def new_game(variant_id: str = "quest") -> GameState:
    """Create a fresh session: zero coins, quests open, every level at base."""
    variant = get_variant(variant_id)
    state = GameState(variant_id=variant.id)
    state.quest_flags = {q.id: False for q in variant.quests}
    state.upgrade_levels = {
        udef.id: udef.base_level
        for udef in variant.upgrades.values()
        if udef.levelled
    }
    compute_derived(state)
    return state


def variant_of(state: GameState) -> GameVariant:
    return get_variant(state.variant_id)


def compute_derived(state: GameState) -> None:
    """Recompute cached derived values from the current upgrade levels.

    Call this after any upgrade purchase.
    """
    variant = variant_of(state)

    # Character level: base + how far each upgrade is above its starting level
    level = variant.character_level_base
    for udef in variant.upgrades.values():
        if udef.levelled:
            level += state.upgrade_levels.get(udef.id, udef.base_level) - udef.base_level
    state.character_level = level

    state.coins_per_click = variant.click_yield(state)
    state.coins_per_second = variant.passive_yield(state)


def get_level(state: GameState, kind: UpgradeKind) -> int:
    """Current level of an upgrade (0 for items the variant doesn't level)."""
    udef = variant_of(state).upgrades.get(kind)
    if udef is None or not udef.levelled:
        return 0
    return state.upgrade_levels.get(udef.id, udef.base_level)


# ── Quests ───────────────────────────────────────────────


def quest_reward(state: GameState) -> int:
    """Coins paid for the next completed quest: base reward × reward level."""
    reward_level = state.upgrade_levels.get(UpgradeKind.REWARD.value, 1)
    return variant_of(state).quest_reward_base * reward_level


def is_quest_completed(state: GameState, quest_id: str) -> bool:
    return state.quest_flags.get(quest_id, False)


def complete_quest(state: GameState, quest_id: str) -> bool:
    """Mark a quest done and pay its reward. Returns False if already done."""
    variant = variant_of(state)
    if is_quest_completed(state, quest_id):
        return False

    qdef = variant.quest(quest_id)
    if qdef is None and not variant.accepts_unknown_quests:
        return False

    reward = quest_reward(state)
    state.quest_flags[quest_id] = True
    state.earn(reward)
    state.stats.quests_completed += 1

    name = qdef.name if qdef is not None else quest_id
    state.pending_events.append(QuestCompleted(quest_id, name, reward))
    return True


# ── Tapping & passive income ─────────────────────────────


def handle_tap(state: GameState) -> int:
    """Handle a single tap. Returns coins earned."""
    earned = state.coins_per_click
    state.stats.total_taps += 1
    state.earn(earned)
    return earned


def tick_passive(state: GameState, elapsed_ms: float) -> int:
    """Apply passive income for ``elapsed_ms`` milliseconds. Returns coins earned."""
    if state.coins_per_second <= 0 or elapsed_ms <= 0:
        return 0
    earned = math.floor(state.coins_per_second * elapsed_ms / 1000)
    if earned > 0:
        state.earn(earned)
    return earned


def add_coins(state: GameState, amount: int) -> None:
    """Credit coins directly (admin / test helper)."""
    if amount < 0:
        raise ValueError(f"Cannot add a negative amount of coins: {amount}")
    state.earn(amount)


# ── Spending ─────────────────────────────────────────────


def get_upgrade_cost(state: GameState, kind: UpgradeKind) -> int:
    """Price of the next level (or the flat price) of ``kind``."""
    udef = variant_of(state).upgrades.get(kind)
    if udef is None:
        raise ValueError(f"{kind.value!r} is not sold in the {state.variant_id!r} game")
    return udef.cost_at(get_level(state, kind))


def can_afford(state: GameState, kind: UpgradeKind) -> bool:
    """Check if the player can afford the next level of ``kind``."""
    if not variant_of(state).offers(kind):
        return False
    return state.coins >= get_upgrade_cost(state, kind)


def purchase(state: GameState, kind: UpgradeKind, rng=None) -> bool:
    """Attempt to buy one ticket or one upgrade level. Returns True if successful."""
    variant = variant_of(state)
    udef = variant.upgrades.get(kind)
    if udef is None:
        return False

    cost = get_upgrade_cost(state, kind)
    if state.coins < cost:
        return False

    state.coins -= cost
    state.stats.total_coins_spent += cost

    # Tickets have no level: count it and roll the prize draw
    if not udef.levelled:
        state.stats.tickets_bought += 1
        _draw_prize(state, rng if rng is not None else random)
        return True

    previous_level = state.character_level
    state.upgrade_levels[udef.id] = get_level(state, kind) + 1
    compute_derived(state)

    if state.character_level > previous_level:
        state.pending_events.append(LevelUp(state.character_level))
    return True


def _draw_prize(state: GameState, rng) -> None:
    """Roll the prize draw for one ticket."""
    bal = BALANCE.quest
    if bal.prizes and rng.random() < bal.prize_chance:
        prize = rng.choice(bal.prizes)
        state.stats.prizes_won.append(prize)
        state.pending_events.append(PrizeWon(prize))


def format_number(n: float) -> str:
    """Format a number with suffixes for readability."""
    if n < 0:
        return f"-{format_number(-n)}"

    for threshold, suffix in reversed(BALANCE.economy.suffixes):
        if n >= threshold:
            value = n / threshold
            if value >= 100:
                return f"{value:.0f}{suffix}"
            elif value >= 10:
                return f"{value:.1f}{suffix}"
            else:
                return f"{value:.2f}{suffix}"

    if n == int(n):
        return str(int(n))
    return f"{n:.1f}"
