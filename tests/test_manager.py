"""Tests for the giveaway draw manager"""

import pytest

from roulette_system import config
from roulette_system.database import get_giveaway_winners, load_session_state, setup_giveaway_database
from roulette_system.errors import SessionStateError, TargetNotReached
from roulette_system.manager import GiveawayDrawManager


class RecordingPublisher:
    def __init__(self):
        self.pending = []
        self.accepted = []

    def publish_winner_pending(self, giveaway_id, result):
        self.pending.append((giveaway_id, result))
        return True

    def publish_winners_accepted(self, giveaway_id, records):
        self.accepted.append((giveaway_id, records))
        return True


@pytest.fixture
def publisher():
    return RecordingPublisher()


def test_full_giveaway(engine, four_players, publisher):
    manager = GiveawayDrawManager(engine, 5, publisher=publisher)
    manager.open_session(four_players, target_winner_count=2)

    first = manager.draw()
    rerolled = manager.reroll()
    manager.accept()
    manager.draw()
    manager.accept()

    assert [result for _, result in publisher.pending][:2] == [first, rerolled]
    assert len(publisher.pending) == 3

    records = manager.finalize()
    assert len(records) == 2
    assert manager.session.is_complete
    assert [row["winner_id"] for row in get_giveaway_winners(engine, 5)] == [
        r["winner_id"] for r in records
    ]
    assert load_session_state(engine, 5) is None
    assert publisher.accepted == [(5, records)]


def test_accept_persists_state(engine, four_players, publisher):
    manager = GiveawayDrawManager(engine, "g", publisher=publisher)
    manager.open_session(four_players, target_winner_count=3, client_seed="resumeme")
    manager.draw()
    winner = manager.accept()

    state = load_session_state(engine, "g")
    assert state["client_seed"] == "resumeme"
    assert [w["winner_id"] for w in state["pending_winners"]] == [winner.winner_participant_id]

    resumed = GiveawayDrawManager(engine, "g", publisher=publisher)
    session = resumed.open_session(four_players, target_winner_count=3)
    assert session.winner_ids == [winner.winner_participant_id]
    assert session.target_winner_count == 3


def test_open_session_without_resume(engine, four_players, publisher):
    manager = GiveawayDrawManager(engine, "g", publisher=publisher)
    manager.open_session(four_players, target_winner_count=2)
    manager.draw()
    manager.accept()

    fresh = GiveawayDrawManager(engine, "g", publisher=publisher).open_session(four_players, resume=False)
    assert fresh.pending_winners == []


def test_remove_winner_persists_state(engine, four_players, publisher):
    manager = GiveawayDrawManager(engine, "g", publisher=publisher)
    manager.open_session(four_players, target_winner_count=2)
    manager.draw()
    winner = manager.accept()

    manager.remove_winner(winner.winner_participant_id)
    assert load_session_state(engine, "g")["pending_winners"] == []


def test_finalize_requires_winners(engine, four_players, publisher):
    manager = GiveawayDrawManager(engine, "g", publisher=publisher)
    manager.open_session(four_players, target_winner_count=2)

    with pytest.raises(TargetNotReached):
        manager.finalize()

    manager.draw()
    manager.accept()
    assert len(manager.finalize(allow_partial=True)) == 1


def test_failed_write_keeps_session_open(bare_engine, four_players, publisher):
    manager = GiveawayDrawManager(bare_engine, "g", publisher=publisher)
    manager.open_session(four_players)
    manager.draw()
    manager.accept()

    assert manager.finalize() is None
    assert not manager.session.is_complete
    assert publisher.accepted == []


def test_operations_need_an_open_session(engine, publisher):
    manager = GiveawayDrawManager(engine, "g", publisher=publisher)
    with pytest.raises(SessionStateError):
        manager.draw()


def test_engine_built_from_database_url(monkeypatch, tmp_path, four_players, publisher):
    monkeypatch.setattr(config, "DATABASE_URL", f"sqlite:///{tmp_path / 'managed.db'}")

    manager = GiveawayDrawManager(None, "g", publisher=publisher)
    try:
        assert manager.engine.dialect.name == "sqlite"
        assert setup_giveaway_database(manager.engine)

        manager.open_session(four_players)
        manager.draw()
        manager.accept()
        assert len(manager.finalize()) == 1
        assert len(get_giveaway_winners(manager.engine, "g")) == 1
    finally:
        manager.engine.dispose()
