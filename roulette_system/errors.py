"""
Draw Errors
Failures raised by ticket allocation, winner resolution and selection sessions
"""


class DrawError(ValueError):
    """Base class for recoverable draw failures"""


class EmptyParticipantSet(DrawError):
    """Allocation was requested for an empty participant list"""


class InvalidTicketPool(DrawError):
    """Ticket pool resolves to zero (or fewer) usable tickets"""


class DuplicateParticipant(DrawError):
    """The same participant id appears twice in one draw"""


class NoEligibleParticipants(DrawError):
    """Every participant in the session has already been selected"""


class TargetAlreadyReached(DrawError):
    """The session already holds its target number of winners"""


class TargetNotReached(DrawError):
    """The session cannot be finalized with its current winners"""


class UnknownWinnerId(DrawError):
    """The id passed to remove_winner is not a pending winner"""

    def __init__(self, participant_id):
        super().__init__(f"Participant {participant_id!r} is not a pending winner")
        self.participant_id = participant_id


class SessionStateError(RuntimeError):
    """An operation was called out of sequence (programming error)"""
