"""
Giveaway Entry Collection

Keyword-based and active chatter entries built from Kick chat messages.
"""

import hashlib
import logging
from datetime import datetime, timedelta, timezone

from .config import (
    DEFAULT_MESSAGES_REQUIRED,
    DEFAULT_TIME_WINDOW_MINUTES,
    ENTRY_METHOD_ACTIVE_CHATTER,
    ENTRY_METHOD_KEYWORD,
    MAX_TRACKED_MESSAGE_LENGTH,
)
from .models import Participant

logger = logging.getLogger(__name__)


class EntryCollector:
    """Collects entries for one giveaway from a stream of chat messages"""

    def __init__(self, keyword=None, entry_method=ENTRY_METHOD_KEYWORD,
                 allow_multiple_entries=False, max_entries_per_user=1,
                 messages_required=DEFAULT_MESSAGES_REQUIRED,
                 time_window_minutes=DEFAULT_TIME_WINDOW_MINUTES,
                 verified_only=False, verified_bonus_chances=0):
        if entry_method not in (ENTRY_METHOD_KEYWORD, ENTRY_METHOD_ACTIVE_CHATTER):
            raise ValueError(f"Unknown entry method: {entry_method}")
        if entry_method == ENTRY_METHOD_KEYWORD and not keyword:
            raise ValueError("keyword giveaways need a keyword")
        if max_entries_per_user < 1:
            raise ValueError("max_entries_per_user must be at least 1")

        self.keyword = keyword.strip().lower() if keyword else None
        self.entry_method = entry_method
        self.allow_multiple_entries = allow_multiple_entries
        self.max_entries_per_user = max_entries_per_user
        self.messages_required = messages_required
        self.time_window = timedelta(minutes=time_window_minutes)
        self.verified_only = verified_only
        self.verified_bonus_chances = verified_bonus_chances

        # Keyed by lower-cased Kick username, insertion order = entry order
        self.entries = {}
        self._activity = {}

    def __len__(self):
        return len(self.entries)

    def matches_keyword(self, message):
        """True if the message is the keyword, optionally followed by more text"""
        if not self.keyword or not message:
            return False
        text = message.strip().lower()
        return text == self.keyword or text.startswith(self.keyword + " ")

    def add_entry(self, kick_username, kick_user_id=None, is_verified=False,
                  avatar_url=None, entry_method=None):
        """
        Add an entry for a user

        Returns:
            bool: True if an entry (new or additional) was recorded
        """
        key = kick_username.lower()
        existing = self.entries.get(key)

        if existing:
            if not self.allow_multiple_entries:
                logger.debug(f"{kick_username} already entered")
                return False
            if existing['entry_count'] >= self.max_entries_per_user:
                logger.debug(f"{kick_username} reached max entries ({self.max_entries_per_user})")
                return False

            existing['entry_count'] += 1
            logger.info(f"Added additional entry for {kick_username}")
            return True

        self.entries[key] = {
            'kick_username': kick_username,
            'kick_user_id': kick_user_id,
            'entry_count': 1,
            'entry_method': entry_method or self.entry_method,
            'is_verified': is_verified,
            'avatar_url': avatar_url,
            'entered_at': datetime.now(timezone.utc),
        }
        logger.info(f"Added new entry for {kick_username} via {entry_method or self.entry_method}")
        return True

    def remove_entry(self, kick_username):
        removed = self.entries.pop(kick_username.lower(), None)
        self._activity.pop(kick_username.lower(), None)
        return removed is not None

    def process_message(self, kick_username, message, kick_user_id=None,
                        is_verified=False, avatar_url=None, timestamp=None):
        """
        Handle one chat message event

        Args:
            kick_username: Sender's Kick username
            message: Message content
            kick_user_id: Sender's Kick user id (optional)
            is_verified: Whether the sender has a verified account
            avatar_url: Sender's profile picture (optional)
            timestamp: When the message was sent (defaults to now, UTC)

        Returns:
            bool: True if the message produced an entry
        """
        if not kick_username or message is None:
            return False
        if self.verified_only and not is_verified:
            return False

        if self.entry_method == ENTRY_METHOD_KEYWORD:
            if not self.matches_keyword(message):
                return False
            return self.add_entry(kick_username, kick_user_id, is_verified, avatar_url)

        return self._track_message(kick_username, message, kick_user_id, is_verified,
                                   avatar_url, timestamp or datetime.now(timezone.utc))

    def _track_message(self, kick_username, message, kick_user_id, is_verified, avatar_url, timestamp):
        # Duplicate messages do not count toward active chatter qualification
        message_hash = hashlib.sha256(message.encode()).hexdigest()
        activity = self._activity.setdefault(kick_username.lower(), {})

        if message_hash in activity:
            logger.debug(f"Duplicate message from {kick_username}, not tracking")
            return False
        activity[message_hash] = (timestamp, message[:MAX_TRACKED_MESSAGE_LENGTH])

        cutoff = timestamp - self.time_window
        unique_recent = sum(1 for sent_at, _ in activity.values() if sent_at >= cutoff)

        if unique_recent < self.messages_required:
            return False

        logger.info(f"{kick_username} qualified for auto-entry with {unique_recent} unique messages")
        return self.add_entry(kick_username, kick_user_id, is_verified, avatar_url,
                              entry_method=ENTRY_METHOD_ACTIVE_CHATTER)

    def tracked_messages(self, kick_username):
        """Unique messages counted for a user, truncated for storage"""
        activity = self._activity.get(kick_username.lower(), {})
        return [text for _, text in activity.values()]

    def participants(self):
        """Entrants as Participants, weighted by entry count plus verified bonus"""
        participants = []
        for entry in self.entries.values():
            weight = entry['entry_count']
            if entry['is_verified']:
                weight += self.verified_bonus_chances
            participants.append(Participant(
                id=entry['kick_user_id'] or entry['kick_username'].lower(),
                display_name=entry['kick_username'],
                weight=weight,
                avatar_url=entry['avatar_url'],
                metadata={'entry_method': entry['entry_method'], 'is_verified': entry['is_verified']},
            ))
        return participants
