"""Quest board — the one-time tasks and what they pay."""

from __future__ import annotations

from rich.text import Text
from textual.widget import Widget

from tapgame.engine.economy import format_number, is_quest_completed, quest_reward
from tapgame.engine.game_state import GameState
from tapgame.engine.variants import get_variant


class QuestBoard(Widget):
    """Lists the variant's quests with completion state."""

    DEFAULT_CSS = """
    QuestBoard {
        width: 100%;
        height: auto;
        min-height: 6;
        padding: 1;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._state: GameState | None = None

    def render(self) -> Text:
        text = Text()
        text.append("  ═══ Quests ═══\n\n", style="bold magenta")

        if self._state is None:
            return text

        quests = get_variant(self._state.variant_id).quests
        if not quests:
            text.append("  No quests here.\n", style="dim italic")
            text.append("  Just tap the goose!\n", style="dim italic")
            return text

        reward = format_number(quest_reward(self._state))
        for i, qdef in enumerate(quests):
            done = is_quest_completed(self._state, qdef.id)
            text.append(f"  [{i + 1}] ", style="bold")
            if done:
                text.append(f"{qdef.name} ", style="dim")
                text.append("DONE\n", style="bold green")
            else:
                text.append(f"{qdef.name}\n", style="bold white")
                text.append(f"      {qdef.description}\n", style="dim italic")
                text.append(f"      Reward: {reward} coins\n", style="yellow")
            text.append("\n")

        return text

    def update_from_state(self, state: GameState) -> None:
        self._state = state
        self.refresh()
