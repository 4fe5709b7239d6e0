"""
Bracket Engine Errors

Every failure raised by the bracket engine derives from BracketError,
which is a ValueError so callers validating input can catch either.
"""

from typing import Optional


class BracketError(ValueError):
    """Base class for bracket engine failures."""


class InsufficientParticipants(BracketError):
    """Raised when a bracket is requested for fewer than two entrants."""

    def __init__(self, count: int):
        super().__init__(f"Tournament requires at least 2 participants, got {count}")
        self.count = count


class InvalidAdvancement(BracketError):
    """
    Raised when a decision cannot be applied to the bracket.

    The coordinate may be stale, the match may not have two contestants
    yet, or the chosen winner may not be playing in it. The host should
    discard its view and re-read the current match.
    """

    def __init__(self, message: str, coordinate=None):
        super().__init__(message)
        self.coordinate = coordinate


class RehydrationMismatch(BracketError):
    """
    A persisted match record references a participant that is not in the
    supplied lookup.

    Rehydration reports these instead of raising them: the slot is treated
    as empty and the rest of the bracket is restored.
    """

    def __init__(self, record, participant_id: int, field_name: Optional[str] = None):
        where = f" ({field_name})" if field_name else ""
        super().__init__(
            f"Unknown participant {participant_id}{where} in "
            f"{record.bracket.value} round {record.round} match {record.match_number}"
        )
        self.record = record
        self.participant_id = participant_id
        self.field_name = field_name
