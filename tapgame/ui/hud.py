"""HUD widget — coins, rates, character level and counters."""

from __future__ import annotations

from rich.text import Text
from textual.widget import Widget
from textual.reactive import reactive

from tapgame.engine.economy import format_number
from tapgame.engine.game_state import GameState
from tapgame.engine.variants import get_variant


_KEY_HELP: dict[str, tuple[str, ...]] = {
    "quest": (
        "[1-3] Quests  [T] Ticket",
        "[S] Speed  [R] Reward",
        "[Q] Quit",
    ),
    "goose": (
        "[Space] Tap the goose",
        "[C] Click power  [A] Auto",
        "[Q] Quit",
    ),
}


class HUD(Widget):
    """Heads-up display showing core game stats."""

    DEFAULT_CSS = """
    HUD {
        width: 100%;
        height: 100%;
        padding: 1;
    }
    """

    game_title: reactive[str] = reactive("")
    variant_id: reactive[str] = reactive("quest")
    coins: reactive[str] = reactive("0")
    per_click: reactive[str] = reactive("1")
    per_second: reactive[str] = reactive("0/s")
    character_level: reactive[int] = reactive(1)
    total_taps: reactive[int] = reactive(0)
    tickets: reactive[int] = reactive(0)
    prizes: reactive[int] = reactive(0)

    def render(self) -> Text:
        text = Text()

        text.append(f"  === {self.game_title} ===\n\n", style="bold cyan")

        # Coins
        text.append("  Coins: ", style="dim")
        text.append(f"{self.coins}\n", style="bold yellow")

        text.append("  Level: ", style="dim")
        text.append(f"{self.character_level}\n", style="bold cyan")

        text.append("\n")

        if self.variant_id == "goose":
            text.append("  Per Tap: ", style="dim")
            text.append(f"{self.per_click}\n", style="green")
            text.append("  Passive: ", style="dim")
            text.append(f"{self.per_second}\n", style="green")
            text.append("  Taps: ", style="dim")
            text.append(f"{self.total_taps}\n", style="green")
        else:
            text.append("  Tickets: ", style="dim")
            text.append(f"{self.tickets}\n", style="green")
            text.append("  Prizes: ", style="dim")
            text.append(f"{self.prizes}\n", style="magenta")

        text.append("\n")
        for line in _KEY_HELP.get(self.variant_id, ()):
            text.append(f"  {line}\n", style="dim italic")

        return text

    def update_from_state(self, state: GameState) -> None:
        """Sync HUD with game state."""
        self.game_title = get_variant(state.variant_id).title
        self.variant_id = state.variant_id
        self.coins = format_number(state.coins)
        self.per_click = format_number(state.coins_per_click)
        self.per_second = f"{format_number(state.coins_per_second)}/s"
        self.character_level = state.character_level
        self.total_taps = state.stats.total_taps
        self.tickets = state.stats.tickets_bought
        self.prizes = len(state.stats.prizes_won)
