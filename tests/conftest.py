"""Shared fixtures for the roulette system tests"""

import pytest
from sqlalchemy import create_engine

from roulette_system.database import setup_giveaway_database
from roulette_system.models import Participant


@pytest.fixture
def four_players():
    return [Participant(id=name, display_name=name) for name in "ABCD"]


@pytest.fixture
def seven_players():
    return [Participant(id=f"p{i}", display_name=f"Player {i}") for i in range(1, 8)]


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'giveaways.db'}")
    assert setup_giveaway_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def bare_engine(tmp_path):
    """Engine whose schema was never created"""
    engine = create_engine(f"sqlite:///{tmp_path / 'empty.db'}")
    yield engine
    engine.dispose()


class FakeRedis:
    def __init__(self):
        self.messages = []

    def ping(self):
        return True

    def publish(self, channel, message):
        self.messages.append((channel, message))
        return 1


@pytest.fixture
def fake_redis():
    return FakeRedis()
