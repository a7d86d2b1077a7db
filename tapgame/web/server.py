"""Tapgame Web — Flask server that wraps the Python game engine.

Exposes a JSON API for game actions. Passive income is driven lazily: each
API request catches up on elapsed time before acting and returning the
current state. All access to the session's state happens under one lock.
"""

from __future__ import annotations

import asyncio
import logging
import queue
import threading
import time

from flask import Flask, jsonify

from tapgame.data.upgrades import UpgradeKind
from tapgame.engine.economy import (
    can_afford,
    complete_quest,
    format_number,
    get_level,
    get_upgrade_cost,
    handle_tap,
    is_quest_completed,
    new_game,
    purchase,
    quest_reward,
    tick_passive,
)
from tapgame.engine.events import GameEvent, describe, drain_events
from tapgame.engine.game_state import GameState
from tapgame.engine.variants import GameVariant, get_variant
from tapgame.notifier import TelegramNotifier

logger = logging.getLogger(__name__)

# Cap catch-up to 60 s to avoid mega-ticks after long AFK
MAX_CATCH_UP_MS = 60_000

# Event batches waiting for the notifier thread
MAX_QUEUED_BATCHES = 100


class NotificationWorker:
    """One background thread that hands event batches to the notifier.

    Requests only enqueue; they never wait on Telegram. The queue is bounded
    and a batch that doesn't fit is dropped with a warning.
    """

    def __init__(self, notifier: TelegramNotifier, maxsize: int = MAX_QUEUED_BATCHES) -> None:
        self.notifier = notifier
        self.queue: queue.Queue[list[GameEvent] | None] = queue.Queue(maxsize=maxsize)
        self._thread: threading.Thread | None = None
        self._start_lock = threading.Lock()

    def submit(self, events: list[GameEvent]) -> bool:
        """Queue a batch for delivery. Returns False if it had to be dropped."""
        self._ensure_started()
        try:
            self.queue.put_nowait(list(events))
        except queue.Full:
            logger.warning("Notification queue full, dropping %d event(s)", len(events))
            return False
        return True

    def stop(self, timeout: float | None = None) -> None:
        """Deliver what is queued, then end the worker thread."""
        if self._thread is None:
            return
        self.queue.put(None)
        self._thread.join(timeout)
        self._thread = None

    def _ensure_started(self) -> None:
        with self._start_lock:
            if self._thread is None:
                self._thread = threading.Thread(target=self._run, name="tapgame-notify", daemon=True)
                self._thread.start()

    def _run(self) -> None:
        loop = asyncio.new_event_loop()
        try:
            while True:
                events = self.queue.get()
                try:
                    if events is None:
                        return
                    loop.run_until_complete(self.notifier.deliver_all(events))
                finally:
                    self.queue.task_done()
        finally:
            loop.close()


class GameSession:
    """One player's game plus the bookkeeping the web edition needs."""

    def __init__(self, variant_id: str, notifier: TelegramNotifier | None = None) -> None:
        self.variant: GameVariant = get_variant(variant_id)
        self.state: GameState = new_game(self.variant.id)
        self.lock = threading.Lock()
        self.notifier = notifier
        self.worker: NotificationWorker | None = None
        if notifier is not None and notifier.enabled:
            self.worker = NotificationWorker(notifier)
        self.last_tick: float = time.time()
        self.pending_notifications: list[str] = []

    def do_ticks(self) -> None:
        """Catch up passive income since the last call. Caller holds the lock."""
        now = time.time()
        elapsed_ms = (now - self.last_tick) * 1000
        if elapsed_ms <= 0:
            return
        earned = tick_passive(self.state, min(elapsed_ms, MAX_CATCH_UP_MS))
        # Rapid requests would each floor to zero; keep accumulating until a coin lands
        if earned > 0 or self.state.coins_per_second == 0:
            self.last_tick = now

    def collect_events(self) -> None:
        """Drain game events into the notification feed and the notifier."""
        events = drain_events(self.state)
        if not events:
            return
        self.pending_notifications.extend(describe(e) for e in events)
        if self.worker is not None:
            self.worker.submit(events)

    def state_json(self) -> dict:
        """Build the JSON blob sent to the client. Caller holds the lock."""
        s = self.state
        reward = quest_reward(s)

        quests = [
            {
                "id": q.id,
                "name": q.name,
                "description": q.description,
                "completed": is_quest_completed(s, q.id),
                "reward": reward,
            }
            for q in self.variant.quests
        ]

        upgrades = []
        for kind, udef in self.variant.upgrades.items():
            cost = get_upgrade_cost(s, kind)
            upgrades.append({
                "id": udef.id,
                "name": udef.name,
                "description": udef.description,
                "level": get_level(s, kind) if udef.levelled else None,
                "cost": format_number(cost),
                "cost_raw": cost,
                "can_afford": can_afford(s, kind),
            })

        notifs = list(self.pending_notifications)
        self.pending_notifications.clear()

        return {
            "variant": self.variant.id,
            "title": self.variant.title,
            "coins": format_number(s.coins),
            "coins_raw": s.coins,
            "coins_per_click": s.coins_per_click,
            "coins_per_second": s.coins_per_second,
            "character_level": s.character_level,
            "quests": quests,
            "upgrades": upgrades,
            "notifications": notifs,
            "stats": {
                "total_taps": s.stats.total_taps,
                "tickets_bought": s.stats.tickets_bought,
                "quests_completed": s.stats.quests_completed,
                "total_coins_earned": s.stats.total_coins_earned,
                "total_coins_spent": s.stats.total_coins_spent,
                "prizes_won": list(s.stats.prizes_won),
                "session_duration": s.stats.session_duration_s,
            },
        }


def create_app(variant_id: str = "quest", notifier: TelegramNotifier | None = None) -> Flask:
    """Build a Flask app serving one game session of ``variant_id``."""
    app = Flask(__name__)
    session = GameSession(variant_id, notifier)
    app.extensions["tapgame"] = session

    @app.route("/api/state")
    def api_state():
        with session.lock:
            session.do_ticks()
            return jsonify(session.state_json())

    @app.route("/api/action/tap", methods=["POST"])
    def action_tap():
        with session.lock:
            session.do_ticks()
            earned = handle_tap(session.state)
            data = session.state_json()
            data["earned"] = earned
            return jsonify(data)

    @app.route("/api/action/quest/<quest_id>", methods=["POST"])
    def action_quest(quest_id: str):
        with session.lock:
            session.do_ticks()
            result = complete_quest(session.state, quest_id)
            session.collect_events()
            data = session.state_json()
            data["quest_result"] = result
            return jsonify(data)

    @app.route("/api/action/buy/<kind_id>", methods=["POST"])
    def action_buy(kind_id: str):
        try:
            kind = UpgradeKind.from_id(kind_id)
        except ValueError as exc:
            return jsonify({"error": str(exc)}), 404
        with session.lock:
            session.do_ticks()
            result = purchase(session.state, kind)
            session.collect_events()
            data = session.state_json()
            data["purchase_result"] = result
            return jsonify(data)

    return app


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def run_server(
    host: str = "127.0.0.1",
    port: int = 5000,
    debug: bool = False,
    variant_id: str = "quest",
    notifier: TelegramNotifier | None = None,
) -> None:
    """Start the Flask development server."""
    app = create_app(variant_id, notifier)
    logger.info("Serving %s game on http://%s:%d/", variant_id, host, port)
    try:
        app.run(host=host, port=port, debug=debug, use_reloader=False)
    finally:
        worker = app.extensions["tapgame"].worker
        if worker is not None:
            worker.stop(timeout=5)
