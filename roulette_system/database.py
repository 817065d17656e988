"""
Database Schema Setup for Giveaway Draws
Stores accepted winners with their provably fair proof and in-progress session state
"""

import json
import logging
from datetime import datetime, timezone

from sqlalchemy import create_engine, inspect, text

from . import config

logger = logging.getLogger(__name__)

REQUIRED_TABLES = ['giveaway_winners', 'giveaway_states']


def get_engine(database_url=None):
    """
    Create the SQLAlchemy engine for the giveaway database

    Args:
        database_url: Connection URL (defaults to DATABASE_URL from the environment)
    """
    url = config.normalize_database_url(database_url or config.DATABASE_URL)
    return create_engine(url, pool_pre_ping=True)


def _id_column(engine):
    if engine.dialect.name == 'postgresql':
        return "id SERIAL PRIMARY KEY"
    return "id INTEGER PRIMARY KEY AUTOINCREMENT"


def _schema_statements(engine):
    return [
        f"""
        CREATE TABLE IF NOT EXISTS giveaway_winners (
            {_id_column(engine)},
            giveaway_id TEXT NOT NULL,
            draw_order INTEGER NOT NULL,
            winner_id TEXT NOT NULL,
            winner_username TEXT NOT NULL,
            winning_ticket INTEGER NOT NULL,
            total_tickets INTEGER NOT NULL,
            tickets_per_participant INTEGER,
            policy VARCHAR(20) NOT NULL,
            client_seed TEXT NOT NULL,
            server_seed TEXT NOT NULL,
            nonce BIGINT NOT NULL,
            proof_hash TEXT NOT NULL,
            won_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            UNIQUE(giveaway_id, winner_id)
        )
        """,
        """
        CREATE INDEX IF NOT EXISTS idx_giveaway_winners_giveaway
        ON giveaway_winners(giveaway_id)
        """,
        """
        CREATE TABLE IF NOT EXISTS giveaway_states (
            giveaway_id TEXT PRIMARY KEY,
            state TEXT NOT NULL,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
        """,
    ]


def setup_giveaway_database(engine):
    """
    Create the giveaway winner and session state tables

    Args:
        engine: SQLAlchemy engine instance

    Returns:
        bool: True if successful, False otherwise
    """
    try:
        logger.info("Setting up giveaway database schema...")
        with engine.begin() as conn:
            for statement in _schema_statements(engine):
                conn.execute(text(statement))
        logger.info("✅ Giveaway database schema created successfully")
        return True

    except Exception as e:
        logger.error(f"❌ Failed to setup giveaway database: {e}")
        return False


def verify_giveaway_schema(engine):
    """
    Verify that all required tables exist

    Returns:
        dict: Status of each table (True/False)
    """
    try:
        existing = set(inspect(engine).get_table_names())
    except Exception as e:
        logger.error(f"Failed to verify schema: {e}")
        existing = set()

    return {table: table in existing for table in REQUIRED_TABLES}


def record_winners(engine, giveaway_id, records):
    """
    Store accepted winners of a finalized session

    Args:
        engine: SQLAlchemy engine instance
        giveaway_id: Giveaway the winners belong to
        records: Rows from SelectionSession.records()

    Returns:
        int: Number of winners stored, or None on failure
    """
    try:
        with engine.begin() as conn:
            for record in records:
                conn.execute(text("""
                    INSERT INTO giveaway_winners
                        (giveaway_id, draw_order, winner_id, winner_username, winning_ticket,
                         total_tickets, tickets_per_participant, policy,
                         client_seed, server_seed, nonce, proof_hash, won_at)
                    VALUES
                        (:giveaway_id, :draw_order, :winner_id, :winner_username, :winning_ticket,
                         :total_tickets, :tickets_per_participant, :policy,
                         :client_seed, :server_seed, :nonce, :proof_hash, :won_at)
                """), {
                    'giveaway_id': str(giveaway_id),
                    'draw_order': record['draw_order'],
                    'winner_id': str(record['winner_id']),
                    'winner_username': record['winner_name'],
                    'winning_ticket': record['winning_ticket'],
                    'total_tickets': record['total_tickets'],
                    'tickets_per_participant': record.get('tickets_per_participant'),
                    'policy': record['policy'],
                    'client_seed': record['client_seed'],
                    'server_seed': record['server_seed'],
                    'nonce': record['nonce'],
                    'proof_hash': record['hash'],
                    'won_at': datetime.now(timezone.utc),
                })

        logger.info(f"💾 Stored {len(records)} winner(s) for giveaway {giveaway_id}")
        return len(records)

    except Exception as e:
        logger.error(f"Failed to store winners for giveaway {giveaway_id}: {e}")
        return None


def get_giveaway_winners(engine, giveaway_id):
    """
    Get stored winners of a giveaway in selection order

    Returns:
        list: Winner rows (empty on failure)
    """
    try:
        with engine.begin() as conn:
            result = conn.execute(text("""
                SELECT draw_order, winner_id, winner_username, winning_ticket, total_tickets,
                       tickets_per_participant, policy, client_seed, server_seed, nonce,
                       proof_hash, won_at
                FROM giveaway_winners
                WHERE giveaway_id = :giveaway_id
                ORDER BY draw_order
            """), {'giveaway_id': str(giveaway_id)})

            return [dict(row._mapping) for row in result]

    except Exception as e:
        logger.error(f"Failed to get winners for giveaway {giveaway_id}: {e}")
        return []


def save_session_state(engine, giveaway_id, state):
    """
    Upsert the snapshot of an in-progress selection session

    Returns:
        bool: True if saved
    """
    try:
        with engine.begin() as conn:
            conn.execute(text("""
                INSERT INTO giveaway_states (giveaway_id, state, updated_at)
                VALUES (:giveaway_id, :state, :now)
                ON CONFLICT (giveaway_id)
                DO UPDATE SET state = :state, updated_at = :now
            """), {
                'giveaway_id': str(giveaway_id),
                'state': json.dumps(state),
                'now': datetime.now(timezone.utc),
            })
        return True

    except Exception as e:
        logger.error(f"Failed to save session state for giveaway {giveaway_id}: {e}")
        return False


def load_session_state(engine, giveaway_id):
    """
    Load a saved session snapshot

    Returns:
        dict: Snapshot or None if missing
    """
    try:
        with engine.begin() as conn:
            row = conn.execute(text("""
                SELECT state FROM giveaway_states WHERE giveaway_id = :giveaway_id
            """), {'giveaway_id': str(giveaway_id)}).fetchone()

        return json.loads(row[0]) if row else None

    except Exception as e:
        logger.error(f"Failed to load session state for giveaway {giveaway_id}: {e}")
        return None


def clear_session_state(engine, giveaway_id):
    """Delete a saved session snapshot"""
    try:
        with engine.begin() as conn:
            conn.execute(text("""
                DELETE FROM giveaway_states WHERE giveaway_id = :giveaway_id
            """), {'giveaway_id': str(giveaway_id)})
        return True

    except Exception as e:
        logger.error(f"Failed to clear session state for giveaway {giveaway_id}: {e}")
        return False
