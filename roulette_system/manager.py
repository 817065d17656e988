"""
Giveaway Draw Manager

Runs winner selection for one giveaway: keeps the session snapshot in the
database between operator actions, stores the accepted winners and notifies
the dashboard.
"""

import logging

from utils.redis_publisher import GiveawayRedisPublisher

from .config import POLICY_FIXED_POOL
from .database import (
    clear_session_state,
    get_engine,
    load_session_state,
    record_winners,
    save_session_state,
)
from .errors import SessionStateError
from .session import COMPLETED, SelectionSession

logger = logging.getLogger(__name__)


class GiveawayDrawManager:
    """Manages winner selection for a specific giveaway"""

    def __init__(self, engine, giveaway_id, publisher=None):
        """
        Args:
            engine: SQLAlchemy engine (None builds one from DATABASE_URL)
            giveaway_id: Giveaway the winners are drawn for
            publisher: Dashboard event publisher (defaults to Redis)
        """
        self.engine = engine if engine is not None else get_engine()
        self.giveaway_id = giveaway_id
        self.publisher = publisher or GiveawayRedisPublisher()
        self.session = None

    def open_session(self, participants, target_winner_count=1, policy=POLICY_FIXED_POOL,
                     pool_size=None, client_seed=None, resume=True):
        """
        Open the selection session for this giveaway

        Args:
            participants: Eligible entrants
            target_winner_count: Winners to draw
            policy: Ticket allocation policy
            pool_size: Pool size for the pool policies
            client_seed: Operator supplied client seed (optional)
            resume: Restore a saved, unfinished session instead of starting over

        Returns:
            SelectionSession: the active session
        """
        if resume:
            state = load_session_state(self.engine, self.giveaway_id)
            if state and state.get('state') != COMPLETED:
                self.session = SelectionSession.from_state(state)
                logger.info(
                    f"Resumed giveaway {self.giveaway_id} session "
                    f"({len(self.session.pending_winners)} pending winner(s))"
                )
                return self.session

        self.session = SelectionSession(
            participants,
            target_winner_count=target_winner_count,
            policy=policy,
            pool_size=pool_size,
            client_seed=client_seed,
        )
        self._save()
        logger.info(
            f"🎰 Opened giveaway {self.giveaway_id} session with "
            f"{len(self.session.participants)} participants, {target_winner_count} winner(s) wanted"
        )
        return self.session

    def draw(self):
        result = self._require_session().draw()
        self.publisher.publish_winner_pending(self.giveaway_id, result)
        return result

    def reroll(self):
        result = self._require_session().reroll()
        self.publisher.publish_winner_pending(self.giveaway_id, result)
        return result

    def accept(self):
        result = self._require_session().accept()
        self._save()
        return result

    def remove_winner(self, participant_id):
        result = self._require_session().remove_winner(participant_id)
        self._save()
        return result

    def finalize(self, allow_partial=False):
        """
        Store the accepted winners and close the session

        Returns:
            list: Stored winner records, or None if the database write failed
                (the session stays open so the operator can retry)
        """
        session = self._require_session()
        session.check_finalize(allow_partial)

        records = session.records()
        if record_winners(self.engine, self.giveaway_id, records) is None:
            return None

        session.finalize(allow_partial)
        clear_session_state(self.engine, self.giveaway_id)
        self.publisher.publish_winners_accepted(self.giveaway_id, records)
        return records

    def _require_session(self):
        if self.session is None:
            raise SessionStateError(f"No session open for giveaway {self.giveaway_id}")
        return self.session

    def _save(self):
        save_session_state(self.engine, self.giveaway_id, self.session.to_state())
