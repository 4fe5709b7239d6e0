"""
Bracket Data Model

Value types shared by every part of the bracket engine:
participants, match coordinates, match nodes and the BracketState
aggregate that the host keeps between decisions.
"""

import enum
from dataclasses import dataclass, field, replace
from typing import Iterator, Optional


class BracketType(enum.Enum):
    """Which ladder a match belongs to."""
    WINNERS = "winners"
    LOSERS = "losers"
    GRAND_FINAL = "grand_final"


class TournamentFormat(enum.Enum):
    """Elimination format."""
    SINGLE = "single"
    DOUBLE = "double"


class TournamentStatus(enum.Enum):
    """Persisted tournament status."""
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Participant:
    """
    An entrant in a tournament.

    Only the id takes part in equality and hashing; name and details
    are display data denormalized by the host.
    """
    id: int
    name: str = field(default="", compare=False)
    details: dict = field(default_factory=dict, compare=False, repr=False)

    def __str__(self) -> str:
        return self.name or f"#{self.id}"


@dataclass(frozen=True)
class MatchCoordinate:
    """Address of a match: bracket, 1-based round, 0-based match index."""
    bracket: BracketType
    round: int
    match: int

    def __str__(self) -> str:
        return f"{self.bracket.value} R{self.round} M{self.match}"


@dataclass
class MatchNode:
    """One cell of the bracket."""
    bracket: BracketType
    round: int
    match_number: int
    participant1: Optional[Participant] = None
    participant2: Optional[Participant] = None
    winner: Optional[Participant] = None
    is_bye: bool = False

    @property
    def coordinate(self) -> MatchCoordinate:
        return MatchCoordinate(self.bracket, self.round, self.match_number)

    @property
    def participants(self) -> list[Participant]:
        """Filled slots, slot 1 first."""
        return [p for p in (self.participant1, self.participant2) if p is not None]

    @property
    def is_decidable(self) -> bool:
        """Both contestants present and no result yet."""
        return (
            self.participant1 is not None
            and self.participant2 is not None
            and self.winner is None
        )

    @property
    def loser(self) -> Optional[Participant]:
        if self.winner is None or self.is_bye:
            return None
        return self.opponent_of(self.winner)

    def opponent_of(self, participant: Participant) -> Optional[Participant]:
        if self.participant1 == participant:
            return self.participant2
        if self.participant2 == participant:
            return self.participant1
        return None

    def place(self, participant: Participant) -> bool:
        """Put a participant in the first empty slot. Returns False if full."""
        if self.participant1 is None:
            self.participant1 = participant
        elif self.participant2 is None:
            self.participant2 = participant
        else:
            return False
        return True

    def __str__(self) -> str:
        a = str(self.participant1) if self.participant1 else "?"
        b = str(self.participant2) if self.participant2 else "?"
        return f"{a} vs {b}"


@dataclass
class BracketState:
    """
    Full state of one tournament run.

    Treated as an immutable value by the engine: advancing produces a
    new BracketState built from copy(), so earlier snapshots stay valid
    for undo.
    """
    winners: list[list[MatchNode]]
    losers: list[list[MatchNode]]
    grand_final: Optional[MatchNode]
    current_match: Optional[MatchCoordinate]
    total_winners_rounds: int
    total_losers_rounds: int
    format: TournamentFormat
    is_complete: bool = False
    champion: Optional[Participant] = None

    def get_match(self, coordinate: MatchCoordinate) -> Optional[MatchNode]:
        """Look up a match by coordinate, None if it does not exist."""
        if coordinate.bracket == BracketType.GRAND_FINAL:
            if coordinate.round == 1 and coordinate.match == 0:
                return self.grand_final
            return None

        rounds = self.winners if coordinate.bracket == BracketType.WINNERS else self.losers
        if not 1 <= coordinate.round <= len(rounds):
            return None
        round_nodes = rounds[coordinate.round - 1]
        if not 0 <= coordinate.match < len(round_nodes):
            return None
        return round_nodes[coordinate.match]

    def iter_matches(self) -> Iterator[MatchNode]:
        """Every match in scan order: winners, losers, grand final."""
        for round_nodes in self.winners:
            yield from round_nodes
        for round_nodes in self.losers:
            yield from round_nodes
        if self.grand_final is not None:
            yield self.grand_final

    def find_next_match(self) -> Optional[MatchCoordinate]:
        """First match in scan order that is waiting on a human decision."""
        for node in self.iter_matches():
            if node.is_decidable and not node.is_bye:
                return node.coordinate
        return None

    @property
    def current_node(self) -> Optional[MatchNode]:
        if self.current_match is None:
            return None
        return self.get_match(self.current_match)

    @property
    def terminal_match(self) -> Optional[MatchNode]:
        """The match whose winner is the champion."""
        if self.format == TournamentFormat.DOUBLE:
            return self.grand_final
        if self.winners and self.winners[-1]:
            return self.winners[-1][0]
        return None

    def copy(self) -> "BracketState":
        """Structural copy: new rounds and nodes, shared participants."""
        return replace(
            self,
            winners=[[replace(node) for node in r] for r in self.winners],
            losers=[[replace(node) for node in r] for r in self.losers],
            grand_final=replace(self.grand_final) if self.grand_final else None,
        )
