"""
Roulette System Configuration
All configurable parameters for giveaway winner selection
"""

import os

# Ticket pools
FIXED_POOL_SIZE = 1000               # General roulette splits 1000 tickets between entrants
MIN_ENGAGEMENT_TICKETS = 1           # Every engagement entrant holds at least one ticket

# Provably fair settings
HASH_PREFIX_LENGTH = 8               # First 8 hex chars of the hash -> 0..4294967295
CLIENT_SEED_LENGTH = 13
CLIENT_SEED_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
SERVER_SEED_BYTES = 32               # 64 character hex string

# Allocation policies
POLICY_FIXED_POOL = "fixed_pool"
POLICY_ENGAGEMENT = "engagement"
POLICY_BALANCED_POOL = "balanced_pool"
ALLOCATION_POLICIES = (POLICY_FIXED_POOL, POLICY_ENGAGEMENT, POLICY_BALANCED_POOL)

# Twitter/X engagement points
RETWEET_POINTS = 2
LIKE_POINTS = 1

# Chat entries
ENTRY_METHOD_KEYWORD = "keyword"
ENTRY_METHOD_ACTIVE_CHATTER = "active_chatter"
DEFAULT_MESSAGES_REQUIRED = 3
DEFAULT_TIME_WINDOW_MINUTES = 10
MAX_TRACKED_MESSAGE_LENGTH = 500

# Fairness simulation
DEFAULT_SIMULATIONS = 1000

# Dashboard notifications
GIVEAWAY_CHANNEL = "bot:giveaway"

# Environment driven settings
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///giveaways.db")
REDIS_URL = os.getenv("REDIS_URL")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
PORT = int(os.getenv("PORT", "8080"))


def normalize_database_url(url):
    """Convert Heroku/Railway style postgres:// URLs for SQLAlchemy"""
    if url and url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url
