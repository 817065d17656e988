"""
Provably Fair Utilities for Giveaway Draws
Implements SHA-256 based seed hashing and ticket derivation

Verification method (published to viewers):
1. Concatenate: "client_seed:server_seed:nonce"
2. Compute the SHA-256 hex digest of the UTF-8 encoded string
3. Convert the first 8 hex chars to an integer (0-4294967295)
4. Winning ticket = (integer % total_tickets) + 1
"""

import hashlib
import secrets
import time
from typing import Optional

from .config import (
    CLIENT_SEED_ALPHABET,
    CLIENT_SEED_LENGTH,
    HASH_PREFIX_LENGTH,
    SERVER_SEED_BYTES,
)
from .errors import InvalidTicketPool
from .models import DrawSeedMaterial


def generate_client_seed(length: int = CLIENT_SEED_LENGTH) -> str:
    """Short random alphanumeric token the operator may inspect or replace"""
    return ''.join(secrets.choice(CLIENT_SEED_ALPHABET) for _ in range(length))


def generate_server_seed() -> str:
    """Cryptographically secure server seed (64 character hex string)"""
    return secrets.token_hex(SERVER_SEED_BYTES)


def generate_nonce(previous: Optional[int] = None) -> int:
    """
    Millisecond timestamp nonce

    Args:
        previous: Last nonce used in the same session. The returned nonce is
            always greater than it, even if the clock has not advanced.
    """
    nonce = time.time_ns() // 1_000_000
    if previous is not None and nonce <= previous:
        nonce = previous + 1
    return nonce


def hash_seeds(client_seed: str, server_seed: str, nonce: int) -> str:
    """SHA-256 hex digest of "client_seed:server_seed:nonce" """
    combined = f"{client_seed}:{server_seed}:{nonce}"
    return hashlib.sha256(combined.encode('utf-8')).hexdigest()


def hash_to_int(proof_hash: str, prefix_length: int = HASH_PREFIX_LENGTH) -> int:
    """Interpret the first prefix_length hex chars of the hash as an unsigned integer"""
    return int(proof_hash[:prefix_length], 16)


def ticket_from_hash(proof_hash: str, total_tickets: int,
                     prefix_length: int = HASH_PREFIX_LENGTH) -> int:
    """
    Map a proof hash to a winning ticket in [1, total_tickets]

    Raises:
        InvalidTicketPool: total_tickets is zero or negative
    """
    if total_tickets <= 0:
        raise InvalidTicketPool(f"Cannot draw from a pool of {total_tickets} tickets")
    return (hash_to_int(proof_hash, prefix_length) % total_tickets) + 1


def new_seed_material(client_seed: Optional[str] = None,
                      previous_nonce: Optional[int] = None) -> DrawSeedMaterial:
    """Fresh server seed and nonce, paired with the given (or a new) client seed"""
    return DrawSeedMaterial(
        client_seed=client_seed if client_seed is not None else generate_client_seed(),
        server_seed=generate_server_seed(),
        nonce=generate_nonce(previous_nonce),
    )


def verify_draw(client_seed: str, server_seed: str, nonce: int, expected_hash: str,
                total_tickets: int, expected_ticket: int) -> bool:
    """
    Verify a published draw by recomputing the hash and winning ticket

    Args:
        client_seed: Published client seed
        server_seed: Revealed server seed
        nonce: Draw nonce
        expected_hash: Published proof hash
        total_tickets: Size of the ticket pool at draw time
        expected_ticket: Published winning ticket

    Returns:
        True if both the hash and the ticket match
    """
    computed_hash = hash_seeds(client_seed, server_seed, nonce)
    if computed_hash != expected_hash.lower():
        return False

    try:
        computed_ticket = ticket_from_hash(computed_hash, total_tickets)
    except InvalidTicketPool:
        return False

    return computed_ticket == expected_ticket
