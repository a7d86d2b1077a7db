"""Tests for the Flask web edition."""

from __future__ import annotations

import threading

import pytest

from tapgame.engine.economy import add_coins, compute_derived
from tapgame.web.server import NotificationWorker, create_app


@pytest.fixture
def quest_client():
    app = create_app("quest")
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def goose_app():
    app = create_app("goose")
    app.config["TESTING"] = True
    return app


def test_state_shape(quest_client):
    data = quest_client.get("/api/state").get_json()
    assert data["variant"] == "quest"
    assert data["coins_raw"] == 0
    assert data["character_level"] == 1
    assert [q["id"] for q in data["quests"]] == ["telegram", "dzen", "portal"]
    assert {u["id"] for u in data["upgrades"]} == {"ticket", "speed", "reward"}
    assert data["notifications"] == []


def test_complete_quest_once(quest_client):
    first = quest_client.post("/api/action/quest/telegram").get_json()
    assert first["quest_result"] is True
    assert first["coins_raw"] == 10
    assert first["notifications"] == ["Quest complete: Telegram channel! +10 coins"]

    second = quest_client.post("/api/action/quest/telegram").get_json()
    assert second["quest_result"] is False
    assert second["coins_raw"] == 10
    assert second["notifications"] == []


def test_buy_without_funds(quest_client):
    data = quest_client.post("/api/action/buy/speed").get_json()
    assert data["purchase_result"] is False
    assert data["coins_raw"] == 0


def test_buy_upgrade(quest_client):
    session = quest_client.application.extensions["tapgame"]
    add_coins(session.state, 25)

    data = quest_client.post("/api/action/buy/speed").get_json()

    assert data["purchase_result"] is True
    assert data["coins_raw"] == 0
    assert data["character_level"] == 2
    speed = next(u for u in data["upgrades"] if u["id"] == "speed")
    assert speed["level"] == 2
    assert speed["cost_raw"] == 50
    assert "Level up! Your character is now level 2" in data["notifications"]


def test_buy_unknown_kind_is_404(quest_client):
    resp = quest_client.post("/api/action/buy/rocket")
    assert resp.status_code == 404
    assert "Unknown upgrade kind" in resp.get_json()["error"]


def test_buy_kind_from_other_variant(quest_client):
    session = quest_client.application.extensions["tapgame"]
    add_coins(session.state, 1000)
    data = quest_client.post("/api/action/buy/click_power").get_json()
    assert data["purchase_result"] is False
    assert data["coins_raw"] == 1000


def test_goose_tap(goose_app):
    client = goose_app.test_client()
    for _ in range(3):
        data = client.post("/api/action/tap").get_json()
    assert data["earned"] == 1
    assert data["coins_raw"] == 3
    assert data["stats"]["total_taps"] == 3
    assert data["quests"] == []


def test_goose_passive_catch_up(goose_app):
    session = goose_app.extensions["tapgame"]
    session.state.upgrade_levels["auto_clicker"] = 2
    compute_derived(session.state)
    # Pretend ten seconds went by since the last request
    session.last_tick -= 10.0

    data = goose_app.test_client().get("/api/state").get_json()

    assert data["coins_per_second"] == 2
    assert 20 <= data["coins_raw"] <= 21


def test_goose_passive_catch_up_is_capped(goose_app):
    session = goose_app.extensions["tapgame"]
    session.state.upgrade_levels["auto_clicker"] = 1
    compute_derived(session.state)
    session.last_tick -= 3600.0

    data = goose_app.test_client().get("/api/state").get_json()

    assert data["coins_raw"] == 60


class _RecordingNotifier:
    enabled = True

    def __init__(self, gate: threading.Event | None = None) -> None:
        self.batches: list[list] = []
        self.started = threading.Event()
        self._gate = gate

    async def deliver_all(self, events):
        self.started.set()
        if self._gate is not None:
            self._gate.wait(5)
        self.batches.append(list(events))
        return len(events)


def test_events_forwarded_to_notifier():
    notifier = _RecordingNotifier()
    app = create_app("quest", notifier=notifier)
    client = app.test_client()
    client.post("/api/action/quest/portal")
    client.post("/api/action/quest/dzen")

    worker = app.extensions["tapgame"].worker
    worker.stop(timeout=5)

    assert [[e.quest_id for e in batch] for batch in notifier.batches] == [["portal"], ["dzen"]]


def test_notifications_share_one_thread():
    notifier = _RecordingNotifier()
    app = create_app("quest", notifier=notifier)
    client = app.test_client()

    before = threading.active_count()
    for qid in ("telegram", "dzen", "portal"):
        client.post(f"/api/action/quest/{qid}")
    assert threading.active_count() <= before + 1

    app.extensions["tapgame"].worker.stop(timeout=5)
    assert len(notifier.batches) == 3


def test_disabled_notifier_gets_no_worker():
    class _Off:
        enabled = False

    app = create_app("quest", notifier=_Off())
    assert app.extensions["tapgame"].worker is None
    data = app.test_client().post("/api/action/quest/portal").get_json()
    assert data["quest_result"] is True


def test_worker_drops_batches_when_queue_full():
    gate = threading.Event()
    notifier = _RecordingNotifier(gate)
    worker = NotificationWorker(notifier, maxsize=1)

    assert worker.submit(["first"])
    assert notifier.started.wait(5)
    # The thread is busy with "first"; one batch fits in the queue
    assert worker.submit(["second"])
    assert not worker.submit(["third"])

    gate.set()
    worker.stop(timeout=5)
    assert notifier.batches == [["first"], ["second"]]
