"""Upgrade panel — everything on sale in the current variant."""

from __future__ import annotations

from rich.text import Text
from textual.widget import Widget
from textual.reactive import reactive

from tapgame.data.upgrades import UpgradeDef, UpgradeKind
from tapgame.engine.economy import format_number, get_level, get_upgrade_cost
from tapgame.engine.game_state import GameState
from tapgame.engine.variants import get_variant


_HOTKEYS: dict[UpgradeKind, str] = {
    UpgradeKind.TICKET: "T",
    UpgradeKind.SPEED: "S",
    UpgradeKind.REWARD: "R",
    UpgradeKind.CLICK_POWER: "C",
    UpgradeKind.AUTO_CLICKER: "A",
}


def _stat_summary(state: GameState, udef: UpgradeDef) -> str:
    """Human-readable current effect of an upgrade, empty when nothing to show."""
    if udef.kind == UpgradeKind.TICKET:
        return f"{state.stats.tickets_bought} bought"
    if udef.kind == UpgradeKind.CLICK_POWER:
        return f"{state.coins_per_click} coins per tap"
    if udef.kind == UpgradeKind.AUTO_CLICKER:
        return f"{state.coins_per_second} coins per second"
    if udef.kind == UpgradeKind.REWARD:
        return f"quest reward ×{get_level(state, udef.kind)}"
    return ""


class UpgradePanel(Widget):
    """Displays upgrades with level, cost and affordability."""

    DEFAULT_CSS = """
    UpgradePanel {
        width: 100%;
        height: 100%;
        padding: 1;
        overflow-y: auto;
    }
    """

    # Serialized panel data for reactivity
    offerings_text: reactive[str] = reactive("")

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._state: GameState | None = None

    def render(self) -> Text:
        text = Text()
        text.append("  ═══ Shop ═══\n\n", style="bold magenta")

        if self._state is None:
            return text

        state = self._state
        for kind, udef in get_variant(state.variant_id).upgrades.items():
            cost = get_upgrade_cost(state, kind)
            affordable = state.coins >= cost

            text.append(f"  [{_HOTKEYS[kind]}] ", style="bold")
            name_style = "bold green" if affordable else "bold red"
            text.append(f"{udef.name} ", style=name_style)
            if udef.levelled:
                text.append(f"Lv.{get_level(state, kind)}", style="dim")
            text.append("\n")

            text.append(f"      {udef.description}\n", style="dim italic")

            stat = _stat_summary(state, udef)
            if stat:
                text.append(f"      Now: {stat}\n", style="cyan")

            cost_style = "green" if affordable else "red"
            text.append(f"      Cost: {format_number(cost)} coins\n", style=cost_style)
            text.append("\n")

        return text

    def update_from_state(self, state: GameState) -> None:
        """Sync panel with game state."""
        self._state = state
        # Trigger re-render via reactive
        self.offerings_text = "|".join(
            f"{k}:{v}" for k, v in sorted(state.upgrade_levels.items())
        ) + f"|c:{state.coins}|t:{state.stats.tickets_bought}"
