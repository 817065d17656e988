"""
Roulette System Package
Provably fair winner selection for Kick and Twitter/X giveaways
"""

__version__ = "1.0.0"

# Export main components
from .draw import resolve_winner, simulate_draws, verify_result, win_probability
from .errors import (
    DrawError,
    DuplicateParticipant,
    EmptyParticipantSet,
    InvalidTicketPool,
    NoEligibleParticipants,
    SessionStateError,
    TargetAlreadyReached,
    TargetNotReached,
    UnknownWinnerId,
)
from .models import DrawResult, DrawSeedMaterial, Participant
from .provably_fair import (
    generate_client_seed,
    generate_nonce,
    generate_server_seed,
    hash_seeds,
    verify_draw,
)
from .session import SelectionSession
from .tickets import TicketAllocation, TicketRange, allocate

__all__ = [
    'DrawError',
    'DrawResult',
    'DrawSeedMaterial',
    'DuplicateParticipant',
    'EmptyParticipantSet',
    'InvalidTicketPool',
    'NoEligibleParticipants',
    'Participant',
    'SelectionSession',
    'SessionStateError',
    'TargetAlreadyReached',
    'TargetNotReached',
    'TicketAllocation',
    'TicketRange',
    'UnknownWinnerId',
    'allocate',
    'generate_client_seed',
    'generate_nonce',
    'generate_server_seed',
    'hash_seeds',
    'resolve_winner',
    'simulate_draws',
    'verify_draw',
    'verify_result',
    'win_probability',
]
