"""
Ticket Allocation
Maps a participant list onto contiguous ticket ranges

Each participant's tickets are sequential entries in the pool.
Example: A (10 tickets) = entries 1-10, B (25 tickets) = entries 11-35
"""

import bisect
import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Dict, Optional, Sequence, Tuple

from .config import (
    FIXED_POOL_SIZE,
    MIN_ENGAGEMENT_TICKETS,
    POLICY_BALANCED_POOL,
    POLICY_ENGAGEMENT,
    POLICY_FIXED_POOL,
)
from .errors import DuplicateParticipant, EmptyParticipantSet, InvalidTicketPool
from .models import Participant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TicketRange:
    """Inclusive ticket range owned by one participant"""
    participant_id: Any
    start: int
    end: int

    @property
    def count(self):
        return self.end - self.start + 1

    def contains(self, ticket):
        return self.start <= ticket <= self.end

    def to_dict(self):
        return {
            'participant_id': self.participant_id,
            'start_ticket': self.start,
            'end_ticket': self.end,
            'ticket_count': self.count,
        }


@dataclass(frozen=True)
class TicketAllocation:
    """Ticket layout for one draw, ordered like the input participant list"""
    policy: str
    total_tickets: int
    participants: Tuple[Participant, ...]
    ranges: Tuple[TicketRange, ...]
    tickets_per_participant: Optional[int] = None

    @property
    def dead_tickets(self):
        """Tickets past the last range (fixed pool remainder)"""
        if not self.ranges:
            return 0
        return self.total_tickets - self.ranges[-1].end

    @property
    def ranges_by_participant_id(self) -> Dict[Any, TicketRange]:
        return {r.participant_id: r for r in self.ranges}

    def owner_index(self, ticket: int) -> int:
        """
        Index of the participant holding a ticket

        Fixed pool tickets past the last range belong to the last participant.

        Raises:
            InvalidTicketPool: empty pool or ticket outside [1, total_tickets]
        """
        if self.total_tickets <= 0 or not self.ranges:
            raise InvalidTicketPool("Allocation has no tickets")
        if not 1 <= ticket <= self.total_tickets:
            raise InvalidTicketPool(
                f"Ticket #{ticket} is outside the pool 1-{self.total_tickets}"
            )

        if self.policy == POLICY_FIXED_POOL and self.tickets_per_participant:
            index = (ticket - 1) // self.tickets_per_participant
            return min(index, len(self.ranges) - 1)

        ends = [r.end for r in self.ranges]
        return min(bisect.bisect_left(ends, ticket), len(self.ranges) - 1)

    def owner_of(self, ticket: int) -> Participant:
        return self.participants[self.owner_index(ticket)]

    def tickets_for(self, participant_id) -> int:
        """Tickets that resolve to a participant, including dead tickets for the last one"""
        for index, ticket_range in enumerate(self.ranges):
            if ticket_range.participant_id == participant_id:
                if index == len(self.ranges) - 1:
                    return ticket_range.count + self.dead_tickets
                return ticket_range.count
        return 0

    def odds(self, participant_id) -> Fraction:
        """Exact probability that a uniformly drawn ticket resolves to participant_id"""
        if self.total_tickets <= 0:
            raise InvalidTicketPool("Allocation has no tickets")
        return Fraction(self.tickets_for(participant_id), self.total_tickets)

    def to_dict(self):
        return {
            'policy': self.policy,
            'total_tickets': self.total_tickets,
            'tickets_per_participant': self.tickets_per_participant,
            'dead_tickets': self.dead_tickets,
            'ranges': [r.to_dict() for r in self.ranges],
        }


def ensure_unique(participants):
    """Raise DuplicateParticipant if any id repeats"""
    seen = set()
    for participant in participants:
        if participant.id in seen:
            raise DuplicateParticipant(f"Participant {participant.id!r} appears more than once")
        seen.add(participant.id)


def _build_ranges(participants, counts):
    ranges = []
    current_ticket = 1
    for participant, ticket_count in zip(participants, counts):
        ranges.append(TicketRange(
            participant_id=participant.id,
            start=current_ticket,
            end=current_ticket + ticket_count - 1,
        ))
        current_ticket += ticket_count
    return tuple(ranges)


def _allocate_fixed_pool(participants, pool_size):
    count = len(participants)
    if pool_size <= 0 or pool_size < count:
        raise InvalidTicketPool(
            f"Pool of {pool_size} tickets cannot cover {count} participants"
        )

    tickets_per_participant = pool_size // count
    return TicketAllocation(
        policy=POLICY_FIXED_POOL,
        total_tickets=pool_size,
        participants=participants,
        ranges=_build_ranges(participants, [tickets_per_participant] * count),
        tickets_per_participant=tickets_per_participant,
    )


def _allocate_balanced_pool(participants, pool_size):
    count = len(participants)
    if pool_size <= 0 or pool_size < count:
        raise InvalidTicketPool(
            f"Pool of {pool_size} tickets cannot cover {count} participants"
        )

    # Remainder tickets go one each to the first participants
    base, extra = divmod(pool_size, count)
    counts = [base + 1 if i < extra else base for i in range(count)]
    return TicketAllocation(
        policy=POLICY_BALANCED_POOL,
        total_tickets=pool_size,
        participants=participants,
        ranges=_build_ranges(participants, counts),
    )


def _allocate_engagement(participants):
    counts = [max(MIN_ENGAGEMENT_TICKETS, p.weight) for p in participants]
    total_tickets = sum(counts)
    if total_tickets <= 0:
        raise InvalidTicketPool("Engagement weights produced an empty pool")

    return TicketAllocation(
        policy=POLICY_ENGAGEMENT,
        total_tickets=total_tickets,
        participants=participants,
        ranges=_build_ranges(participants, counts),
    )


def allocate(participants: Sequence[Participant], policy: str = POLICY_ENGAGEMENT,
             pool_size: Optional[int] = None) -> TicketAllocation:
    """
    Convert a participant list into a ticket allocation

    Args:
        participants: Entrants in draw order (order decides range order)
        policy: fixed_pool, balanced_pool or engagement
        pool_size: Pool size for the pool policies (default 1000)

    Returns:
        TicketAllocation: total tickets and per-participant ranges

    Raises:
        EmptyParticipantSet: no participants
        DuplicateParticipant: an id appears twice
        InvalidTicketPool: the pool cannot give every participant a ticket
        ValueError: unknown policy
    """
    participants = tuple(participants)
    if not participants:
        raise EmptyParticipantSet("No participants to allocate tickets to")
    ensure_unique(participants)

    if pool_size is None:
        pool_size = FIXED_POOL_SIZE

    if policy == POLICY_FIXED_POOL:
        allocation = _allocate_fixed_pool(participants, pool_size)
    elif policy == POLICY_BALANCED_POOL:
        allocation = _allocate_balanced_pool(participants, pool_size)
    elif policy == POLICY_ENGAGEMENT:
        allocation = _allocate_engagement(participants)
    else:
        raise ValueError(f"Unknown allocation policy: {policy}")

    logger.debug(
        f"Allocated {allocation.total_tickets} tickets to {len(participants)} participants "
        f"({policy}, dead tickets: {allocation.dead_tickets})"
    )
    return allocation
