"""
Provably Fair Verification Server
Lets viewers recompute giveaway draws and preview ticket odds
"""

from dotenv import load_dotenv
from flask import Flask, jsonify, request

# Load .env before the config module reads the environment
load_dotenv()

from roulette_system.config import PORT, POLICY_FIXED_POOL
from roulette_system.models import Participant
from roulette_system.provably_fair import hash_seeds, hash_to_int, ticket_from_hash
from roulette_system.tickets import allocate
from utils.error_helpers import api_error_handler, json_error, json_success, require_fields
from utils.logging_config import log_route_access, setup_logging


def _parse_participants(data):
    raw = data.get('participants')
    if not isinstance(raw, list):
        raise ValueError("participants must be a list")
    if not all(isinstance(item, dict) for item in raw):
        raise ValueError("each participant must be an object")
    return [Participant.from_dict(item) for item in raw]


def _pool_size(data):
    pool_size = data.get('pool_size')
    if pool_size is None:
        return None
    try:
        return int(pool_size)
    except (TypeError, ValueError):
        raise ValueError(f"pool_size must be an integer, got {pool_size!r}")


def create_app():
    """Build the Flask app serving the verification API"""
    logger = setup_logging('verify_server', extra_loggers=('roulette_system',))

    app = Flask(__name__)

    @app.errorhandler(404)
    def handle_404(e):
        logger.info(f"ℹ️ 404: {request.method} {request.path}")
        return json_error("Not Found", 404)

    @app.route('/health')
    def health():
        return jsonify({"status": "healthy"}), 200

    @app.route('/api/draw/verify', methods=['POST'])
    @api_error_handler
    def verify_draw_route():
        """
        Recompute a draw from its published seeds

        Body: client_seed, server_seed, nonce and either total_tickets or a
        participants list (+ policy, pool_size). Optional hash and
        winning_ticket are compared against the recomputed values.
        """
        log_route_access(logger, '/api/draw/verify', 'POST')
        data = request.get_json(silent=True)
        require_fields(data, ['client_seed', 'server_seed', 'nonce'])

        nonce = int(data['nonce'])
        proof_hash = hash_seeds(str(data['client_seed']), str(data['server_seed']), nonce)

        winner = None
        if data.get('participants') is not None:
            allocation = allocate(
                _parse_participants(data),
                data.get('policy', POLICY_FIXED_POOL),
                _pool_size(data),
            )
            total_tickets = allocation.total_tickets
            winning_ticket = ticket_from_hash(proof_hash, total_tickets)
            winner = allocation.owner_of(winning_ticket).to_dict()
        else:
            require_fields(data, ['total_tickets'])
            total_tickets = int(data['total_tickets'])
            winning_ticket = ticket_from_hash(proof_hash, total_tickets)

        checks = {}
        if data.get('hash') is not None:
            checks['hash_matches'] = proof_hash == str(data['hash']).lower()
        if data.get('winning_ticket') is not None:
            checks['ticket_matches'] = winning_ticket == int(data['winning_ticket'])

        return json_success({
            'hash': proof_hash,
            'hash_int': hash_to_int(proof_hash),
            'total_tickets': total_tickets,
            'winning_ticket': winning_ticket,
            'winner': winner,
            'valid': all(checks.values()) if checks else None,
            **checks,
        })

    @app.route('/api/draw/allocate', methods=['POST'])
    @api_error_handler
    def allocate_route():
        """Preview ticket ranges and odds for a participant list"""
        log_route_access(logger, '/api/draw/allocate', 'POST')
        data = request.get_json(silent=True)
        require_fields(data, ['participants'])

        allocation = allocate(
            _parse_participants(data),
            data.get('policy', POLICY_FIXED_POOL),
            _pool_size(data),
        )
        summary = allocation.to_dict()
        for ticket_range in summary['ranges']:
            odds = allocation.odds(ticket_range['participant_id'])
            ticket_range['probability_percent'] = float(odds) * 100
        return json_success(summary)

    return app


if __name__ == '__main__':
    create_app().run(host='0.0.0.0', port=PORT)
