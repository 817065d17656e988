"""
Giveaway Draw Logic
Resolves provably fair winners from seed material and a ticket allocation
"""

import logging
import secrets

from .config import DEFAULT_SIMULATIONS
from .errors import InvalidTicketPool, SessionStateError
from .models import DrawResult
from .provably_fair import hash_seeds, ticket_from_hash

logger = logging.getLogger(__name__)


def resolve_winner(seed_material, allocation):
    """
    Deterministically select the winning ticket and its owner

    Anyone holding the published seed material and the ticket layout can
    recompute the hash and ticket and arrive at the same winner.

    Args:
        seed_material: DrawSeedMaterial (client seed, server seed, nonce)
        allocation: TicketAllocation from tickets.allocate()

    Returns:
        DrawResult: the resolved draw

    Raises:
        InvalidTicketPool: allocation holds no tickets
        SessionStateError: seed material is missing
    """
    if seed_material is None:
        raise SessionStateError("Cannot resolve a draw without seed material")
    if allocation.total_tickets <= 0:
        raise InvalidTicketPool(f"Cannot draw from a pool of {allocation.total_tickets} tickets")

    proof_hash = hash_seeds(seed_material.client_seed, seed_material.server_seed, seed_material.nonce)
    winning_ticket = ticket_from_hash(proof_hash, allocation.total_tickets)
    winner = allocation.owner_of(winning_ticket)

    result = DrawResult(
        seed_material=seed_material,
        hash=proof_hash,
        total_tickets=allocation.total_tickets,
        winning_ticket_number=winning_ticket,
        winner_participant_id=winner.id,
        winner=winner,
        policy=allocation.policy,
        tickets_per_participant=allocation.tickets_per_participant,
        winner_tickets=allocation.tickets_for(winner.id),
    )

    logger.info(f"🎲 Resolved draw over {len(allocation.participants)} participants")
    logger.info(f"   Total tickets: {allocation.total_tickets}")
    logger.info(f"   Client seed: {seed_material.client_seed}")
    logger.info(f"   Nonce: {seed_material.nonce}")
    logger.info(f"   Proof hash: {proof_hash}")
    logger.info(f"   Winning ticket: #{winning_ticket} -> {winner.label}")

    return result


def verify_result(result):
    """
    Recompute a DrawResult from its published fields

    Returns:
        bool: True if hash and winning ticket both match
    """
    computed_hash = hash_seeds(result.client_seed, result.server_seed, result.nonce)
    if computed_hash != result.hash:
        return False

    try:
        return ticket_from_hash(computed_hash, result.total_tickets) == result.winning_ticket_number
    except InvalidTicketPool:
        return False


def win_probability(allocation, participant_id):
    """
    Calculate a participant's probability of winning

    Args:
        allocation: TicketAllocation to inspect
        participant_id: Participant to look up

    Returns:
        dict: Win probability info or None if the participant holds no tickets
    """
    user_tickets = allocation.tickets_for(participant_id)
    if user_tickets == 0 or allocation.total_tickets <= 0:
        return None

    return {
        'user_tickets': user_tickets,
        'total_tickets': allocation.total_tickets,
        'probability_percent': user_tickets / allocation.total_tickets * 100,
        'odds': f"{user_tickets}/{allocation.total_tickets}",
    }


def simulate_draws(allocation, num_simulations=DEFAULT_SIMULATIONS, randbelow=None):
    """
    Simulate multiple draws to verify fairness (testing purposes)

    Args:
        allocation: TicketAllocation to draw from
        num_simulations: Number of simulations to run
        randbelow: Callable returning an int in [0, n); defaults to secrets.randbelow

    Returns:
        dict: Simulation results
    """
    if allocation.total_tickets <= 0:
        raise InvalidTicketPool("Cannot simulate an empty pool")

    randbelow = randbelow or secrets.randbelow
    wins = [0] * len(allocation.participants)

    for _ in range(num_simulations):
        winning_ticket = randbelow(allocation.total_tickets) + 1
        wins[allocation.owner_index(winning_ticket)] += 1

    results = []
    for index, participant in enumerate(allocation.participants):
        tickets = allocation.tickets_for(participant.id)
        expected_wins = tickets / allocation.total_tickets * num_simulations
        actual_wins = wins[index]
        variance = ((actual_wins - expected_wins) / expected_wins * 100) if expected_wins > 0 else 0

        results.append({
            'participant_id': participant.id,
            'display_name': participant.label,
            'tickets': tickets,
            'expected_wins': expected_wins,
            'actual_wins': actual_wins,
            'variance_percent': variance,
        })

    return {
        'num_simulations': num_simulations,
        'total_tickets': allocation.total_tickets,
        'participants': len(allocation.participants),
        'results': results,
    }
