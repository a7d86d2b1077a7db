"""Tests for the Textual app, driven through the headless pilot."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

from tapgame.app import TapGameApp
from tapgame.engine.economy import add_coins, compute_derived, get_level
from tapgame.data.upgrades import UpgradeKind


def _run(app: TapGameApp, *keys: str) -> TapGameApp:
    async def _drive() -> None:
        async with app.run_test() as pilot:
            for key in keys:
                await pilot.press(key)
            await pilot.pause()

    asyncio.run(_drive())
    return app


def test_goose_taps_with_space():
    app = _run(TapGameApp(variant_id="goose"), "space", "space", "space")
    assert app.state.coins == 3
    assert app.state.stats.total_taps == 3


def test_goose_upgrade_unaffordable():
    app = _run(TapGameApp(variant_id="goose"), "space", "c")
    assert app.state.coins == 1
    assert get_level(app.state, UpgradeKind.CLICK_POWER) == 1


def test_quest_keys_complete_quests():
    app = _run(TapGameApp(variant_id="quest"), "1", "2", "3", "1")
    assert app.state.coins == 30
    assert all(app.state.quest_flags.values())
    # Events were drained into toasts
    assert app.state.pending_events == []


def test_quest_game_ignores_tap():
    app = _run(TapGameApp(variant_id="quest"), "space")
    assert app.state.coins == 0
    assert app.state.stats.total_taps == 0


def test_buy_upgrade_with_key():
    app = TapGameApp(variant_id="quest")
    add_coins(app.state, 25)
    _run(app, "s")
    assert app.state.coins == 0
    assert get_level(app.state, UpgradeKind.SPEED) == 2
    assert app.state.character_level == 2


def test_events_handed_to_notifier():
    notifier = MagicMock()
    notifier.enabled = True
    notifier.deliver = AsyncMock(return_value=True)

    _run(TapGameApp(variant_id="quest", notifier=notifier), "1")

    notifier.deliver.assert_called_once()
    (event,) = notifier.deliver.call_args.args
    assert event.quest_id == "telegram"


def test_disabled_notifier_not_called():
    notifier = MagicMock()
    notifier.enabled = False
    notifier.deliver = AsyncMock(return_value=False)

    _run(TapGameApp(variant_id="quest", notifier=notifier), "1")

    notifier.deliver.assert_not_called()


def _fake_clock(monkeypatch, *moments: float) -> None:
    ticks = list(moments)

    def _now() -> float:
        return ticks.pop(0) if len(ticks) > 1 else ticks[0]

    monkeypatch.setattr("tapgame.app.time.time", _now)


def test_game_tick_keeps_fraction_of_early_tick(monkeypatch):
    app = TapGameApp(variant_id="goose")
    app.state.upgrade_levels["auto_clicker"] = 1
    compute_derived(app.state)
    monkeypatch.setattr(app, "_sync_ui", lambda: None)

    t0 = 1_000.0
    app._last_tick = t0
    # set_interval drifts: a late tick is followed by an early one
    _fake_clock(monkeypatch, t0 + 1.005, t0 + 2.000, t0 + 2.990)
    for _ in range(3):
        app._game_tick()

    assert app.state.coins == 2


def test_game_tick_without_income_advances_clock(monkeypatch):
    app = TapGameApp(variant_id="goose")
    monkeypatch.setattr(app, "_sync_ui", lambda: None)

    app._last_tick = 500.0
    _fake_clock(monkeypatch, 501.0)
    app._game_tick()

    assert app.state.coins == 0
    assert app._last_tick == 501.0
