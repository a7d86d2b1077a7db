"""Balance constants — all tuning knobs in one place.

Tweak these to adjust prices, rewards and pacing for both game variants.
Quest-game upgrades cost base_cost * level; goose-game upgrades cost
base_cost * (growth ^ (level - offset)), rounded down.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class QuestGameBalance:
    """Tuning for the quest / upgrade game."""

    # Coins per completed quest at reward level 1
    quest_reward_base: int = 10

    # Flat ticket price in the prize shop
    ticket_price: int = 50

    # Linear upgrade costs: base * current_level
    speed_base_cost: int = 25
    reward_base_cost: int = 30

    # Character level = base + sum of booster levels above 1
    character_level_base: int = 1

    # Chance that a purchased ticket wins something from the prize table
    prize_chance: float = 0.10
    prizes: tuple[str, ...] = (
        "Branded mug",
        "Hoodie",
        "Notebook set",
        "Excursion pass",
        "Sticker pack",
    )


@dataclass(frozen=True)
class GooseGameBalance:
    """Tuning for the goose tapping game."""

    click_power_base_cost: int = 10
    auto_clicker_base_cost: int = 50
    # Geometric cost growth shared by both goose upgrades
    cost_growth: float = 1.15
    # Passive coins per second granted by each auto-clicker level
    coins_per_second_per_level: int = 1


@dataclass(frozen=True)
class EconomyBalance:
    """Display settings shared by every variant."""

    # Large number formatting thresholds
    suffixes: tuple[tuple[float, str], ...] = (
        (1e3, "K"),
        (1e6, "M"),
        (1e9, "B"),
        (1e12, "T"),
        (1e15, "Qa"),
        (1e18, "Qi"),
    )


@dataclass(frozen=True)
class GameBalance:
    """Top-level container for all balance constants."""

    quest: QuestGameBalance = field(default_factory=QuestGameBalance)
    goose: GooseGameBalance = field(default_factory=GooseGameBalance)
    economy: EconomyBalance = field(default_factory=EconomyBalance)

    # Passive income + display refresh cadence
    tick_interval_s: float = 1.0


# Singleton — import this everywhere
BALANCE = GameBalance()
