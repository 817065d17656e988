"""
Redis Publisher for Giveaway Events
Publishes draw events to Redis channels for dashboard notifications
"""

import json
import logging

import redis

from roulette_system import config
from roulette_system.config import GIVEAWAY_CHANNEL

logger = logging.getLogger(__name__)


class GiveawayRedisPublisher:
    def __init__(self, redis_url=None, client=None):
        self.client = client
        self.enabled = client is not None
        if self.enabled:
            return

        redis_url = redis_url or config.REDIS_URL
        if redis_url:
            if '://' not in redis_url:
                redis_url = f'redis://{redis_url}'
            try:
                self.client = redis.from_url(redis_url, decode_responses=True)
                self.client.ping()
                self.enabled = True
                logger.info("✅ Giveaway Redis publisher connected")
            except redis.RedisError as e:
                logger.warning(f"⚠️ Redis unavailable for giveaway publisher: {e}")
                self.enabled = False
        else:
            logger.info("REDIS_URL not set, giveaway events will not be published")

    def publish(self, channel, action, data=None):
        """Publish an event to a Redis channel"""
        if not self.enabled:
            return False

        try:
            message = json.dumps({
                'action': action,
                'data': data or {}
            }, default=str)
            self.client.publish(channel, message)
            logger.debug(f"📤 Published to {channel}: {action}")
            return True
        except redis.RedisError as e:
            logger.error(f"❌ Failed to publish to {channel}: {e}")
            return False

    def publish_winner_pending(self, giveaway_id, result):
        """Publish a freshly drawn (not yet accepted) winner so the overlay can spin to it"""
        return self.publish(GIVEAWAY_CHANNEL, 'winner_pending', {
            'giveaway_id': giveaway_id,
            **result.to_dict(),
        })

    def publish_winners_accepted(self, giveaway_id, records):
        """Publish the final winner list of a giveaway"""
        return self.publish(GIVEAWAY_CHANNEL, 'winners_accepted', {
            'giveaway_id': giveaway_id,
            'winners': records,
        })
