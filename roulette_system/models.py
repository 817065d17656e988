"""
Roulette Data Model
Participants, seed material and draw results shared by the selection core
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Participant:
    """One eligible entrant of a giveaway draw"""
    id: Any
    display_name: str = ""
    weight: int = 1
    avatar_url: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        """Validate participant"""
        if self.id is None:
            raise ValueError("participant id cannot be None")
        if isinstance(self.weight, bool) or not isinstance(self.weight, int):
            raise ValueError(f"weight for {self.id!r} must be an integer")

    @property
    def label(self):
        return self.display_name or str(self.id)

    def to_dict(self):
        return {
            'id': self.id,
            'display_name': self.display_name,
            'weight': self.weight,
            'avatar_url': self.avatar_url,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data.get('id'),
            display_name=data.get('display_name') or data.get('username') or "",
            weight=int(data.get('weight', 1)),
            avatar_url=data.get('avatar_url'),
        )


@dataclass(frozen=True)
class DrawSeedMaterial:
    """Inputs that make a single draw reproducible"""
    client_seed: str
    server_seed: str
    nonce: int

    def to_dict(self):
        return {
            'client_seed': self.client_seed,
            'server_seed': self.server_seed,
            'nonce': self.nonce,
        }


@dataclass(frozen=True)
class DrawResult:
    """
    Output of one resolved draw

    Everything an auditor needs to recompute the winner is exposed by
    to_dict(): seeds, nonce, hash, ticket number and pool layout.
    """
    seed_material: DrawSeedMaterial
    hash: str
    total_tickets: int
    winning_ticket_number: int
    winner_participant_id: Any
    winner: Participant
    policy: str
    tickets_per_participant: Optional[int] = None
    winner_tickets: int = 1

    @property
    def client_seed(self):
        return self.seed_material.client_seed

    @property
    def server_seed(self):
        return self.seed_material.server_seed

    @property
    def nonce(self):
        return self.seed_material.nonce

    @property
    def win_probability(self):
        """Winner's chance in percent at the time of the draw"""
        return self.winner_tickets / self.total_tickets * 100

    def to_dict(self):
        return {
            'client_seed': self.client_seed,
            'server_seed': self.server_seed,
            'nonce': self.nonce,
            'hash': self.hash,
            'policy': self.policy,
            'total_tickets': self.total_tickets,
            'tickets_per_participant': self.tickets_per_participant,
            'winning_ticket': self.winning_ticket_number,
            'winner_id': self.winner_participant_id,
            'winner_name': self.winner.label,
            'winner_avatar_url': self.winner.avatar_url,
            'winner_weight': self.winner.weight,
            'winner_tickets': self.winner_tickets,
        }

    @classmethod
    def from_dict(cls, data):
        winner = Participant(
            id=data['winner_id'],
            display_name=data.get('winner_name') or "",
            weight=int(data.get('winner_weight', 1)),
            avatar_url=data.get('winner_avatar_url'),
        )
        return cls(
            seed_material=DrawSeedMaterial(
                client_seed=data['client_seed'],
                server_seed=data['server_seed'],
                nonce=int(data['nonce']),
            ),
            hash=data['hash'],
            total_tickets=int(data['total_tickets']),
            winning_ticket_number=int(data['winning_ticket']),
            winner_participant_id=data['winner_id'],
            winner=winner,
            policy=data['policy'],
            tickets_per_participant=data.get('tickets_per_participant'),
            winner_tickets=int(data.get('winner_tickets', 1)),
        )
