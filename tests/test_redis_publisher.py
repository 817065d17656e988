"""Tests for the giveaway Redis publisher"""

import json

import redis

from roulette_system import config
from roulette_system.draw import resolve_winner
from roulette_system.models import DrawSeedMaterial
from roulette_system.tickets import allocate
from utils.redis_publisher import GiveawayRedisPublisher


def test_disabled_without_redis_url(monkeypatch):
    monkeypatch.setattr(config, "REDIS_URL", None)
    publisher = GiveawayRedisPublisher()

    assert not publisher.enabled
    assert publisher.publish("bot:giveaway", "winner_pending", {}) is False


def test_unreachable_redis_disables_publisher(monkeypatch):
    class DownRedis:
        def ping(self):
            raise redis.ConnectionError("connection refused")

    monkeypatch.setattr(redis, "from_url", lambda url, **kwargs: DownRedis())
    publisher = GiveawayRedisPublisher(redis_url="localhost:6379")

    assert not publisher.enabled


def test_connects_from_url(monkeypatch, fake_redis):
    seen = {}

    def from_url(url, **kwargs):
        seen["url"] = url
        return fake_redis

    monkeypatch.setattr(redis, "from_url", from_url)
    publisher = GiveawayRedisPublisher(redis_url="localhost:6379")

    assert publisher.enabled
    assert seen["url"] == "redis://localhost:6379"


def test_publish_winner_pending(fake_redis, four_players):
    publisher = GiveawayRedisPublisher(client=fake_redis)
    result = resolve_winner(
        DrawSeedMaterial(client_seed="alpha", server_seed="beta", nonce=1),
        allocate(four_players, "fixed_pool"),
    )

    assert publisher.publish_winner_pending(9, result)

    channel, message = fake_redis.messages[0]
    payload = json.loads(message)
    assert channel == "bot:giveaway"
    assert payload["action"] == "winner_pending"
    assert payload["data"]["giveaway_id"] == 9
    assert payload["data"]["winner_id"] == "D"
    assert payload["data"]["winning_ticket"] == 802


def test_publish_winners_accepted(fake_redis):
    publisher = GiveawayRedisPublisher(client=fake_redis)

    assert publisher.publish_winners_accepted("g", [{"winner_id": "A"}])

    payload = json.loads(fake_redis.messages[0][1])
    assert payload == {"action": "winners_accepted", "data": {"giveaway_id": "g", "winners": [{"winner_id": "A"}]}}


def test_publish_failure_returns_false():
    class BrokenRedis:
        def publish(self, channel, message):
            raise redis.ConnectionError("connection reset")

    publisher = GiveawayRedisPublisher(client=BrokenRedis())
    assert publisher.publish("bot:giveaway", "winner_pending", {"x": 1}) is False


def test_redis_url_from_config(monkeypatch, fake_redis):
    seen = {}

    def from_url(url, **kwargs):
        seen["url"] = url
        return fake_redis

    monkeypatch.setattr(config, "REDIS_URL", "redis://cache:6379/0")
    monkeypatch.setattr(redis, "from_url", from_url)

    assert GiveawayRedisPublisher().enabled
    assert seen["url"] == "redis://cache:6379/0"
