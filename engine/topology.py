"""
Bracket Topology Builder

Computes the shape of an elimination bracket from the participant
count: bracket size, round counts and per-round match counts for the
winners and losers brackets, and whether a grand final exists.

Losers bracket rounds alternate between "minor" rounds (odd, internal
consolidation, half the previous size) and "major" rounds (even, same
size as the previous round, receiving winners-bracket drop-downs).
"""

import math
from dataclasses import dataclass

from engine.bracket import (
    BracketState,
    BracketType,
    MatchNode,
    TournamentFormat,
)
from engine.errors import InsufficientParticipants


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n."""
    if n <= 1:
        return 1
    return 2 ** math.ceil(math.log2(n))


def losers_round_sizes(bracket_size: int, losers_rounds: int) -> list[int]:
    """
    Match counts for each losers round.

    Round 1 takes the losers of winners round 1 in pairs, so it has
    bracket_size / 4 matches. After that even rounds hold the size and
    odd rounds halve it.
    """
    sizes: list[int] = []
    for lr in range(1, losers_rounds + 1):
        if lr == 1:
            size = bracket_size // 4
        elif lr % 2 == 0:
            size = sizes[-1]
        else:
            size = sizes[-1] // 2
        sizes.append(size)
    return sizes


@dataclass(frozen=True)
class BracketTopology:
    """Structural description of a bracket for n participants."""
    participant_count: int
    format: TournamentFormat
    bracket_size: int
    winners_rounds: int
    losers_rounds: int
    winners_round_sizes: tuple[int, ...]
    losers_round_sizes: tuple[int, ...]

    @classmethod
    def for_participants(cls, n: int, format: TournamentFormat) -> "BracketTopology":
        """
        Build the topology for n participants.

        Raises:
            InsufficientParticipants: if n < 2
        """
        if n < 2:
            raise InsufficientParticipants(n)

        format = TournamentFormat(format)
        bracket_size = next_power_of_two(n)
        winners_rounds = int(math.log2(bracket_size))
        winners_sizes = tuple(bracket_size // 2 ** r for r in range(1, winners_rounds + 1))

        if format == TournamentFormat.DOUBLE:
            losers_rounds = (winners_rounds - 1) * 2
        else:
            losers_rounds = 0

        return cls(
            participant_count=n,
            format=format,
            bracket_size=bracket_size,
            winners_rounds=winners_rounds,
            losers_rounds=losers_rounds,
            winners_round_sizes=winners_sizes,
            losers_round_sizes=tuple(losers_round_sizes(bracket_size, losers_rounds)),
        )

    @property
    def byes(self) -> int:
        return self.bracket_size - self.participant_count

    @property
    def has_grand_final(self) -> bool:
        return self.format == TournamentFormat.DOUBLE

    @property
    def total_slots(self) -> int:
        """Number of match cells in the structure, byes and dead cells included."""
        total = sum(self.winners_round_sizes) + sum(self.losers_round_sizes)
        return total + (1 if self.has_grand_final else 0)


def create_empty_bracket(topology: BracketTopology) -> BracketState:
    """Allocate every match cell of the topology with empty slots."""
    winners = [
        [MatchNode(BracketType.WINNERS, r, m) for m in range(size)]
        for r, size in enumerate(topology.winners_round_sizes, start=1)
    ]
    losers = [
        [MatchNode(BracketType.LOSERS, r, m) for m in range(size)]
        for r, size in enumerate(topology.losers_round_sizes, start=1)
    ]
    grand_final = None
    if topology.has_grand_final:
        grand_final = MatchNode(BracketType.GRAND_FINAL, 1, 0)

    return BracketState(
        winners=winners,
        losers=losers,
        grand_final=grand_final,
        current_match=None,
        total_winners_rounds=topology.winners_rounds,
        total_losers_rounds=topology.losers_rounds,
        format=topology.format,
    )


def get_bracket_info(participant_count: int) -> dict:
    """Setup preview: bracket size, winners rounds and byes for a count."""
    bracket_size = next_power_of_two(participant_count)
    return {
        "bracket_size": bracket_size,
        "rounds": int(math.log2(bracket_size)),
        "byes": bracket_size - participant_count,
    }
