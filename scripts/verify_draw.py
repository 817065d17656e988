"""
Verify a published giveaway draw offline.
Recomputes the proof hash and winning ticket from the revealed seeds.
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

from roulette_system.errors import InvalidTicketPool
from roulette_system.provably_fair import hash_seeds, hash_to_int, ticket_from_hash


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Verify a provably fair giveaway draw",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Recompute the winning ticket of a 1000 ticket roulette
  python scripts/verify_draw.py --client-seed k3j2h1 --server-seed 9f8e... --nonce 1700000000000 --total-tickets 1000

  # Check the published hash and ticket as well
  python scripts/verify_draw.py --client-seed k3j2h1 --server-seed 9f8e... --nonce 1700000000000 \\
      --total-tickets 1000 --hash abcd... --winning-ticket 522
        """
    )
    parser.add_argument('--client-seed', required=True, help='Published client seed')
    parser.add_argument('--server-seed', required=True, help='Revealed server seed')
    parser.add_argument('--nonce', required=True, type=int, help='Draw nonce')
    parser.add_argument('--total-tickets', required=True, type=int, help='Ticket pool size at draw time')
    parser.add_argument('--hash', help='Published proof hash to compare')
    parser.add_argument('--winning-ticket', type=int, help='Published winning ticket to compare')

    args = parser.parse_args(argv)
    load_dotenv()

    proof_hash = hash_seeds(args.client_seed, args.server_seed, args.nonce)
    try:
        winning_ticket = ticket_from_hash(proof_hash, args.total_tickets)
    except InvalidTicketPool as e:
        print(f"❌ {e}")
        return 1

    print(f"Proof hash:     {proof_hash}")
    print(f"Hash integer:   {hash_to_int(proof_hash)}")
    print(f"Winning ticket: #{winning_ticket} of {args.total_tickets}")

    ok = True
    if args.hash is not None:
        matches = proof_hash == args.hash.lower()
        ok = ok and matches
        print(f"{'✅' if matches else '❌'} Hash {'matches' if matches else 'does NOT match'}")
    if args.winning_ticket is not None:
        matches = winning_ticket == args.winning_ticket
        ok = ok and matches
        print(f"{'✅' if matches else '❌'} Ticket {'matches' if matches else 'does NOT match'}")

    return 0 if ok else 1


if __name__ == '__main__':
    sys.exit(main())
