"""Tests for upgrade pricing curves and variant policies."""

import pytest

from tapgame.data.upgrades import (
    ALL_UPGRADES,
    AUTO_CLICKER,
    CLICK_POWER,
    REWARD,
    SPEED,
    TICKET,
    CostCurve,
    UpgradeDef,
    UpgradeKind,
)
from tapgame.engine.variants import GOOSE_GAME, QUEST_GAME, VARIANTS, get_variant


def test_flat_cost_ignores_level():
    assert TICKET.curve == CostCurve.FLAT
    assert TICKET.cost_at(0) == TICKET.cost_at(10) == 50


def test_linear_costs():
    assert [SPEED.cost_at(lvl) for lvl in (1, 2, 3)] == [25, 50, 75]
    assert [REWARD.cost_at(lvl) for lvl in (1, 2, 3)] == [30, 60, 90]


def test_geometric_costs_round_down():
    # 10 * 1.15^(level - 1)
    assert [CLICK_POWER.cost_at(lvl) for lvl in (1, 2, 3, 4)] == [10, 11, 13, 15]
    # 50 * 1.15^level
    assert [AUTO_CLICKER.cost_at(lvl) for lvl in (0, 1, 2)] == [50, 57, 66]


def test_geometric_costs_never_decrease():
    costs = [CLICK_POWER.cost_at(lvl) for lvl in range(1, 60)]
    assert costs == sorted(costs)


def test_custom_geometric_growth():
    udef = UpgradeDef(
        kind=UpgradeKind.CLICK_POWER,
        name="Test",
        description="",
        curve=CostCurve.GEOMETRIC,
        base_cost=100,
        growth=1.5,
    )
    assert udef.cost_at(0) == 100
    assert udef.cost_at(2) == 225


def test_upgrade_kind_from_id():
    assert UpgradeKind.from_id("auto_clicker") is UpgradeKind.AUTO_CLICKER
    with pytest.raises(ValueError, match="Unknown upgrade kind"):
        UpgradeKind.from_id("rocket")


def test_registry_covers_every_kind():
    assert set(ALL_UPGRADES) == set(UpgradeKind)
    for kind, udef in ALL_UPGRADES.items():
        assert udef.id == kind.value


def test_quest_game_catalogue():
    assert [q.id for q in QUEST_GAME.quests] == ["telegram", "dzen", "portal"]
    assert set(QUEST_GAME.upgrades) == {UpgradeKind.TICKET, UpgradeKind.SPEED, UpgradeKind.REWARD}
    assert QUEST_GAME.accepts_unknown_quests
    assert not QUEST_GAME.tappable


def test_goose_game_catalogue():
    assert GOOSE_GAME.quests == ()
    assert set(GOOSE_GAME.upgrades) == {UpgradeKind.CLICK_POWER, UpgradeKind.AUTO_CLICKER}
    assert not GOOSE_GAME.accepts_unknown_quests
    assert GOOSE_GAME.tappable


def test_variant_quest_lookup():
    assert QUEST_GAME.quest("portal").name == "Corporate portal"
    assert QUEST_GAME.quest("nope") is None


def test_get_variant():
    assert get_variant("goose") is GOOSE_GAME
    assert set(VARIANTS) == {"quest", "goose"}
    with pytest.raises(KeyError, match="expected one of"):
        get_variant("snake")
