"""Tapgame — Main Textual Application.

Wires together the game engine, the UI and the optional notifier into a
playable TUI game. The app owns its one GameState and hands it to every
widget; nothing else holds a reference to it.
"""

from __future__ import annotations

import time

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.timer import Timer
from textual.widgets import Button, Footer, Header

from tapgame.data.balance import BALANCE
from tapgame.data.upgrades import UpgradeKind
from tapgame.engine.economy import (
    complete_quest,
    handle_tap,
    is_quest_completed,
    new_game,
    purchase,
    tick_passive,
)
from tapgame.engine.events import describe, drain_events
from tapgame.engine.game_state import GameState
from tapgame.engine.variants import GameVariant, get_variant
from tapgame.notifier import TelegramNotifier
from tapgame.ui.hud import HUD
from tapgame.ui.quest_board import QuestBoard
from tapgame.ui.upgrade_panel import UpgradePanel


class TapGameApp(App):
    """The Tapgame TUI application."""

    CSS = """
    #game-container {
        height: 1fr;
    }
    #hud-panel {
        width: 30;
    }
    #center-panel {
        width: 1fr;
        align-horizontal: center;
    }
    #goose-button {
        width: 24;
        height: 5;
        margin: 1;
    }
    #upgrade-panel {
        width: 44;
    }
    """

    BINDINGS = [
        Binding("space", "tap", "Tap", show=True, priority=True),
        Binding("enter", "tap", "Tap", show=False),
        Binding("1", "complete_quest(0)", "Quest #1", show=False),
        Binding("2", "complete_quest(1)", "Quest #2", show=False),
        Binding("3", "complete_quest(2)", "Quest #3", show=False),
        Binding("t", "buy('ticket')", "Ticket", show=True),
        Binding("s", "buy('speed')", "Speed", show=True),
        Binding("r", "buy('reward')", "Reward", show=True),
        Binding("c", "buy('click_power')", "Click Power", show=True),
        Binding("a", "buy('auto_clicker')", "Auto-Clicker", show=True),
        Binding("q", "quit", "Quit", show=True),
    ]

    def __init__(
        self,
        variant_id: str = "quest",
        notifier: TelegramNotifier | None = None,
    ) -> None:
        super().__init__()
        self._variant: GameVariant = get_variant(variant_id)
        self._state: GameState = new_game(self._variant.id)
        self._notifier = notifier
        self._last_tick: float = time.time()
        self._tick_timer: Timer | None = None
        self.title = self._variant.title
        self.sub_title = self._variant.subtitle

    @property
    def state(self) -> GameState:
        return self._state

    def compose(self) -> ComposeResult:
        yield Header()

        with Horizontal(id="game-container"):
            # Left: HUD
            yield HUD(id="hud-panel")

            # Center: quests, or the goose to tap
            with Vertical(id="center-panel"):
                if self._variant.tappable:
                    yield Button("🪿  TAP THE GOOSE", id="goose-button", variant="warning")
                yield QuestBoard(id="quest-board")

            # Right: Shop
            yield UpgradePanel(id="upgrade-panel")

        yield Footer()

    def on_mount(self) -> None:
        """Start the passive income / refresh timer."""
        self._tick_timer = self.set_interval(BALANCE.tick_interval_s, self._game_tick)
        self._last_tick = time.time()
        self._sync_ui()

    def _game_tick(self) -> None:
        """Periodic tick: passive income, then a display refresh."""
        now = time.time()
        elapsed_ms = (now - self._last_tick) * 1000

        earned = tick_passive(self._state, elapsed_ms)
        # An early tick floors to zero; keep the clock until a coin lands
        if earned > 0 or self._state.coins_per_second <= 0:
            self._last_tick = now
        self._sync_ui()

    def _sync_ui(self) -> None:
        """Push game state to all UI widgets."""
        self.query_one("#hud-panel", HUD).update_from_state(self._state)
        self.query_one("#quest-board", QuestBoard).update_from_state(self._state)
        self.query_one("#upgrade-panel", UpgradePanel).update_from_state(self._state)

    def _publish_events(self) -> None:
        """Turn drained game events into toasts and hand them to the notifier."""
        for event in drain_events(self._state):
            self.notify(describe(event), severity="information", timeout=3)
            if self._notifier is not None and self._notifier.enabled:
                self.run_worker(
                    self._notifier.deliver(event),
                    group="notifications",
                    exit_on_error=False,
                )

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Hide bindings that make no sense in the active variant."""
        if action == "tap":
            return self._variant.tappable
        if action == "complete_quest":
            index = parameters[0] if parameters else 0
            return isinstance(index, int) and index < len(self._variant.quests)
        if action == "buy":
            kind_id = parameters[0] if parameters else ""
            return any(kind.value == kind_id for kind in self._variant.upgrades)
        return True

    # ── Actions ──────────────────────────────────────

    def action_tap(self) -> None:
        """Handle a tap on the goose."""
        handle_tap(self._state)
        self._sync_ui()

    @on(Button.Pressed, "#goose-button")
    def _on_goose_pressed(self) -> None:
        self.action_tap()

    def action_complete_quest(self, index: int) -> None:
        """Complete the quest at position ``index`` (0-based)."""
        quests = self._variant.quests
        if index >= len(quests):
            return

        qdef = quests[index]
        if is_quest_completed(self._state, qdef.id):
            self.notify("Quest already completed!", severity="error", timeout=1)
            return
        complete_quest(self._state, qdef.id)
        self._publish_events()
        self._sync_ui()

    def action_buy(self, kind_id: str) -> None:
        """Buy a ticket or one upgrade level."""
        kind = UpgradeKind.from_id(kind_id)
        if not self._variant.offers(kind):
            return

        if purchase(self._state, kind):
            udef = self._variant.upgrades[kind]
            self.notify(f"Bought {udef.name}!", severity="information", timeout=1)
            self._publish_events()
        else:
            self.notify("Not enough coins!", severity="error", timeout=1)
        self._sync_ui()
