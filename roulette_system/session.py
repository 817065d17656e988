"""
Selection Session
Multi-winner giveaway draws with reroll, removal and final acceptance

Lifecycle:
    idle --start_draw--> drawing --resolve--> pending_acceptance
    pending_acceptance --accept--> idle
    pending_acceptance --reroll--> pending_acceptance (fresh seeds)
    any --remove_winner--> idle
    idle --finalize--> completed
"""

import dataclasses
import logging

from .config import ALLOCATION_POLICIES, POLICY_FIXED_POOL
from .draw import resolve_winner
from .errors import (
    DrawError,
    NoEligibleParticipants,
    SessionStateError,
    TargetAlreadyReached,
    TargetNotReached,
    UnknownWinnerId,
)
from .models import DrawResult, DrawSeedMaterial, Participant
from .provably_fair import generate_client_seed, generate_nonce, generate_server_seed
from .tickets import allocate, ensure_unique

logger = logging.getLogger(__name__)

IDLE = "idle"
DRAWING = "drawing"
PENDING_ACCEPTANCE = "pending_acceptance"
COMPLETED = "completed"


class SelectionSession:
    """Tracks the winners drawn for one giveaway until the operator accepts them"""

    def __init__(self, participants, target_winner_count=1, policy=POLICY_FIXED_POOL,
                 pool_size=None, client_seed=None, server_seed_generator=None):
        """
        Args:
            participants: Eligible entrants, in display order
            target_winner_count: Winners this giveaway should produce
            policy: Ticket allocation policy used for every draw
            pool_size: Pool size for the fixed/balanced pool policies
            client_seed: Operator-visible client seed (generated if omitted)
            server_seed_generator: Callable producing server seeds
        """
        if target_winner_count < 1:
            raise ValueError("target_winner_count must be at least 1")
        if policy not in ALLOCATION_POLICIES:
            raise ValueError(f"Unknown allocation policy: {policy}")

        self.participants = tuple(participants)
        ensure_unique(self.participants)

        self.target_winner_count = target_winner_count
        self.policy = policy
        self.pool_size = pool_size
        self.client_seed = client_seed or generate_client_seed()
        self._server_seed_generator = server_seed_generator or generate_server_seed

        self.state = IDLE
        self.pending_winners = []
        self.pending_result = None
        self.seed_material = None
        self.last_nonce = None

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def winner_ids(self):
        return [result.winner_participant_id for result in self.pending_winners]

    @property
    def remaining_participants(self):
        selected = set(self.winner_ids)
        return [p for p in self.participants if p.id not in selected]

    @property
    def target_reached(self):
        return len(self.pending_winners) >= self.target_winner_count

    @property
    def can_draw(self):
        return self.state == IDLE and not self.target_reached and bool(self.remaining_participants)

    @property
    def is_complete(self):
        return self.state == COMPLETED

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def set_client_seed(self, client_seed):
        """Replace the client seed before the next draw"""
        self._require_state(IDLE, "change the client seed")
        if not client_seed:
            raise ValueError("client seed cannot be empty")
        self.client_seed = client_seed

    def start_draw(self):
        """
        Begin a draw: lock in fresh seed material

        Returns:
            DrawSeedMaterial: seeds the pending draw will be resolved with

        Raises:
            TargetAlreadyReached: the session already holds its winners
            NoEligibleParticipants: every participant has been selected
            InvalidTicketPool: the remaining participants cannot be allocated
        """
        self._require_state(IDLE, "start a draw")
        self._check_can_draw()
        # Validate the pool before any state changes
        allocate(self.remaining_participants, self.policy, self.pool_size)
        self.seed_material = self._next_seed_material()
        self.state = DRAWING
        return self.seed_material

    def resolve(self):
        """Resolve the draw started by start_draw()"""
        self._require_state(DRAWING, "resolve a draw")
        if self.seed_material is None:
            raise SessionStateError("Cannot resolve a draw without seed material")

        try:
            result = self._resolve(self.seed_material)
        except DrawError:
            self._reset_draw()
            raise
        self._set_pending(result)
        return result

    def draw(self):
        """Start and resolve a draw in one step"""
        self._require_state(IDLE, "draw")
        self._check_can_draw()

        result = self._resolve(self._next_seed_material())
        self._set_pending(result)
        return result

    def reroll(self):
        """Discard the pending result and draw again from the same pool"""
        self._require_state(PENDING_ACCEPTANCE, "reroll")
        discarded = self.pending_result

        result = self._resolve(self._next_seed_material())
        self._set_pending(result)
        logger.info(f"🔄 Rerolled {discarded.winner.label} -> {result.winner.label}")
        return result

    def accept(self):
        """Accept the pending result as the next winner"""
        self._require_state(PENDING_ACCEPTANCE, "accept a winner")
        result = self.pending_result

        self.pending_winners.append(result)
        self.pending_result = None
        self.state = IDLE

        logger.info(
            f"✅ Accepted winner #{len(self.pending_winners)}: {result.winner.label} "
            f"(ticket #{result.winning_ticket_number}/{result.total_tickets})"
        )
        return result

    def remove_winner(self, participant_id):
        """
        Undo acceptance of a winner, making them eligible again

        Any draw in progress is discarded.

        Raises:
            UnknownWinnerId: participant_id is not a pending winner
        """
        if self.state == COMPLETED:
            raise SessionStateError("Cannot remove winners from a completed session")

        for index, result in enumerate(self.pending_winners):
            if result.winner_participant_id == participant_id:
                break
        else:
            raise UnknownWinnerId(participant_id)

        del self.pending_winners[index]
        self._reset_draw()

        logger.info(f"↩️ Removed winner {result.winner.label}, back in the pool")
        return result

    def cancel(self):
        """Abandon an in-progress draw; returns True if one was discarded"""
        if self.state not in (DRAWING, PENDING_ACCEPTANCE):
            return False
        self._reset_draw()
        return True

    def finalize(self, allow_partial=False):
        """
        Lock the accepted winners

        Args:
            allow_partial: Accept fewer winners than the target (e.g. when the
                pool ran out or the operator ends the giveaway early)

        Returns:
            list: accepted DrawResults in selection order

        Raises:
            TargetNotReached: no winners, or fewer than the target without allow_partial
        """
        self.check_finalize(allow_partial)

        count = len(self.pending_winners)
        self.state = COMPLETED
        logger.info(f"🎉 Finalized {count} winner(s): {', '.join(r.winner.label for r in self.pending_winners)}")
        return list(self.pending_winners)

    def check_finalize(self, allow_partial=False):
        """Raise if finalize(allow_partial) would fail, without changing the session"""
        self._require_state(IDLE, "finalize")

        count = len(self.pending_winners)
        if count == 0:
            raise TargetNotReached("No winners have been accepted")
        if count < self.target_winner_count and not allow_partial:
            raise TargetNotReached(
                f"Only {count} of {self.target_winner_count} winners have been accepted"
            )

    # ------------------------------------------------------------------
    # Persistence helpers
    # ------------------------------------------------------------------

    def records(self):
        """Winner rows in selection order, ready to be stored"""
        rows = []
        for order, result in enumerate(self.pending_winners, start=1):
            row = result.to_dict()
            row['draw_order'] = order
            rows.append(row)
        return rows

    def to_state(self):
        """JSON-friendly snapshot; draws that were not accepted are not saved"""
        return {
            'state': COMPLETED if self.state == COMPLETED else IDLE,
            'policy': self.policy,
            'pool_size': self.pool_size,
            'target_winner_count': self.target_winner_count,
            'client_seed': self.client_seed,
            'last_nonce': self.last_nonce,
            'participants': [p.to_dict() for p in self.participants],
            'pending_winners': [r.to_dict() for r in self.pending_winners],
            'remaining_participants': [p.id for p in self.remaining_participants],
        }

    @classmethod
    def from_state(cls, state, server_seed_generator=None):
        """Rebuild a session from to_state() output"""
        participants = [Participant.from_dict(p) for p in state['participants']]
        session = cls(
            participants,
            target_winner_count=state['target_winner_count'],
            policy=state['policy'],
            pool_size=state.get('pool_size'),
            client_seed=state.get('client_seed'),
            server_seed_generator=server_seed_generator,
        )
        session.last_nonce = state.get('last_nonce')

        by_id = {p.id: p for p in session.participants}
        for data in state.get('pending_winners', []):
            result = DrawResult.from_dict(data)
            winner = by_id.get(result.winner_participant_id)
            if winner is None:
                raise ValueError(f"Winner {result.winner_participant_id!r} is not a session participant")
            if result.winner_participant_id in session.winner_ids:
                raise ValueError(f"Winner {result.winner_participant_id!r} appears more than once")
            session.pending_winners.append(dataclasses.replace(result, winner=winner))

        if state.get('state') == COMPLETED:
            session.state = COMPLETED
        return session

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_state(self, expected, action):
        if self.state != expected:
            raise SessionStateError(f"Cannot {action} while session is {self.state}")

    def _check_can_draw(self):
        if self.target_reached:
            raise TargetAlreadyReached(
                f"Session already has {self.target_winner_count} winner(s)"
            )
        if not self.remaining_participants:
            raise NoEligibleParticipants("No participants left to draw from")

    def _next_seed_material(self):
        return DrawSeedMaterial(
            client_seed=self.client_seed,
            server_seed=self._server_seed_generator(),
            nonce=generate_nonce(self.last_nonce),
        )

    def _resolve(self, seed_material):
        allocation = allocate(self.remaining_participants, self.policy, self.pool_size)
        return resolve_winner(seed_material, allocation)

    def _set_pending(self, result):
        self.pending_result = result
        self.seed_material = None
        self.last_nonce = result.nonce
        self.state = PENDING_ACCEPTANCE

    def _reset_draw(self):
        self.pending_result = None
        self.seed_material = None
        self.state = IDLE
