"""Tests for seed generation, hashing and ticket derivation"""

import string

import pytest

from roulette_system.errors import InvalidTicketPool
from roulette_system.provably_fair import (
    generate_client_seed,
    generate_nonce,
    generate_server_seed,
    hash_seeds,
    hash_to_int,
    new_seed_material,
    ticket_from_hash,
    verify_draw,
)

ALPHA_HASH = "ed22b919ac0d3ed95bb5a1b2083aaacfd2cca5357ca5e2908e4d1b5acaaec09f"
KICK_HASH = "abcf44e10a540f583e007ce8b135a1d9814e96ee34666d16d8644ff5a320acd7"


@pytest.mark.parametrize("client_seed, server_seed, nonce, expected", [
    ("alpha", "beta", 1, ALPHA_HASH),
    ("kick", "roulette", 1700000000000, KICK_HASH),
    ("abc123", "def456", 42, "01191e95f616fd42ac55731a01b15c9070ff3e9b1ef1f1b2c803ae8ff8a2f4ea"),
])
def test_hash_seeds_known_values(client_seed, server_seed, nonce, expected):
    assert hash_seeds(client_seed, server_seed, nonce) == expected


def test_hash_seeds_is_deterministic_and_sensitive_to_nonce():
    assert hash_seeds("a", "b", 1) == hash_seeds("a", "b", 1)
    assert hash_seeds("a", "b", 1) != hash_seeds("a", "b", 2)


def test_hash_to_int_uses_first_eight_hex_chars():
    assert hash_to_int(ALPHA_HASH) == 0xed22b919 == 3978475801
    assert hash_to_int("ffffffff" + "0" * 56) == 4294967295


@pytest.mark.parametrize("proof_hash, total, expected", [
    (ALPHA_HASH, 1000, 802),
    (ALPHA_HASH, 1, 1),
    (KICK_HASH, 1000, 522),
    (KICK_HASH, 4, 2),
])
def test_ticket_from_hash(proof_hash, total, expected):
    assert ticket_from_hash(proof_hash, total) == expected


@pytest.mark.parametrize("total", [0, -5])
def test_ticket_from_hash_rejects_empty_pool(total):
    with pytest.raises(InvalidTicketPool):
        ticket_from_hash(ALPHA_HASH, total)


def test_generated_seed_shapes():
    client_seed = generate_client_seed()
    assert len(client_seed) == 13
    assert set(client_seed) <= set(string.digits + string.ascii_lowercase)

    server_seed = generate_server_seed()
    assert len(server_seed) == 64
    int(server_seed, 16)

    assert generate_server_seed() != server_seed


def test_nonce_is_strictly_greater_than_previous():
    far_future = 10 ** 15
    assert generate_nonce(far_future) == far_future + 1

    first = generate_nonce()
    assert generate_nonce(first) > first


def test_new_seed_material_keeps_client_seed():
    material = new_seed_material(client_seed="viewerseed", previous_nonce=5)
    assert material.client_seed == "viewerseed"
    assert material.nonce > 5
    assert len(material.server_seed) == 64


def test_verify_draw():
    assert verify_draw("alpha", "beta", 1, ALPHA_HASH, 1000, 802)
    assert verify_draw("alpha", "beta", 1, ALPHA_HASH.upper(), 1000, 802)


def test_verify_draw_detects_tampering():
    assert not verify_draw("alpha", "beta", 1, ALPHA_HASH, 1000, 801)
    assert not verify_draw("alpha", "beta", 2, ALPHA_HASH, 1000, 802)
    assert not verify_draw("alpha", "gamma", 1, ALPHA_HASH, 1000, 802)
    assert not verify_draw("alpha", "beta", 1, ALPHA_HASH, 0, 802)


@pytest.mark.parametrize("total", [1, 2, 7, 1000, 4294967296 + 5])
def test_ticket_always_in_range(total):
    for nonce in range(200):
        ticket = ticket_from_hash(hash_seeds("range", "check", nonce), total)
        assert 1 <= ticket <= total
