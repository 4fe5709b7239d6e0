"""
Seeding & Bye Resolver

Places participants into the first winners round, works out which
cells can ever be filled, and resolves byes.

A cell is "dead" when none of its feeders can ever deliver a
contestant. A bye is granted only when a cell holds one contestant and
its other feeder is structurally unable to produce one; a feeder that
is merely unplayed never triggers a bye.
"""

import logging
import random
from typing import Iterable, Optional, Sequence

from engine.bracket import (
    BracketState,
    BracketType,
    MatchCoordinate,
    MatchNode,
    Participant,
    TournamentFormat,
)
from engine.routing import LOSER_FEED, WINNER_FEED, feeders, place_winner
from engine.topology import BracketTopology, create_empty_bracket

logger = logging.getLogger(__name__)


def shuffle_participants(
    participants: Sequence[Participant],
    rng: Optional[random.Random] = None,
) -> list[Participant]:
    """Uniform random permutation (Fisher-Yates); pass rng to reproduce."""
    out = list(participants)
    (rng or random).shuffle(out)
    return out


def seed_first_round(state: BracketState, participants: Sequence[Participant]) -> None:
    """
    Fill winners round 1 in list order.

    The first n - bracket_size/2 matches take two consecutive
    participants; every remaining match takes one participant in slot 1
    and becomes a bye. No round-1 match is left empty.
    """
    first_round = state.winners[0]
    if len(participants) > 2 * len(first_round):
        raise ValueError(
            f"{len(participants)} participants do not fit a bracket of {2 * len(first_round)}"
        )

    full_matches = max(len(participants) - len(first_round), 0)
    remaining = iter(participants)
    for i, node in enumerate(first_round):
        node.participant1 = next(remaining, None)
        if i < full_matches:
            node.participant2 = next(remaining, None)


class Liveness:
    """
    Structural reachability of every cell in a bracket.

    Depends only on winners round 1 occupancy, which never changes after
    seeding, so one instance stays valid while the state is advanced.
    """

    def __init__(self, state: BracketState):
        self._state = state
        self._counts: dict[MatchCoordinate, int] = {}

    def live_feed_count(self, node: MatchNode) -> int:
        """How many contestants this cell can ever receive (0, 1 or 2)."""
        key = node.coordinate
        if key not in self._counts:
            if node.bracket == BracketType.WINNERS and node.round == 1:
                count = len(node.participants)
            else:
                count = sum(
                    1 for kind, feeder in feeders(self._state, node)
                    if self._feed_is_live(kind, feeder)
                )
            self._counts[key] = count
        return self._counts[key]

    def is_dead(self, node: MatchNode) -> bool:
        return self.live_feed_count(node) == 0

    def is_contested(self, node: MatchNode) -> bool:
        """Will this cell ever be a real two-contestant match?"""
        return self.live_feed_count(node) == 2

    def _feed_is_live(self, kind: str, feeder: MatchNode) -> bool:
        if kind == WINNER_FEED:
            return not self.is_dead(feeder)
        if kind == LOSER_FEED:
            # Only a contested winners match ever produces a loser
            return feeder.bracket == BracketType.WINNERS and self.is_contested(feeder)
        return False


def resolve_byes(state: BracketState, liveness: Optional[Liveness] = None) -> list[MatchNode]:
    """
    Resolve every pending bye and route the bye winners forward.

    Repeats until no cell changes, since a bye winner can complete the
    condition for another bye further on. Mutates state.

    Returns:
        The nodes resolved as byes, in resolution order
    """
    liveness = liveness or Liveness(state)
    resolved: list[MatchNode] = []

    changed = True
    while changed:
        changed = False
        for node in state.iter_matches():
            if node.winner is not None:
                continue
            occupants = node.participants
            if len(occupants) == 1 and liveness.live_feed_count(node) == 1:
                node.winner = occupants[0]
                node.is_bye = True
                place_winner(state, node, occupants[0])
                resolved.append(node)
                changed = True
                logger.debug("Bye for %s at %s", occupants[0], node.coordinate)

    return resolved


def generate_bracket(
    participants: Iterable[Participant],
    format: TournamentFormat = TournamentFormat.SINGLE,
    shuffle: bool = False,
    rng: Optional[random.Random] = None,
) -> BracketState:
    """
    Build the initial BracketState for a tournament.

    Args:
        participants: Entrants in seeding order
        format: SINGLE or DOUBLE elimination
        shuffle: Randomize the order before seeding
        rng: Optional random source for a reproducible shuffle

    Returns:
        A fresh BracketState with byes resolved and the first match current

    Raises:
        InsufficientParticipants: fewer than two entrants
        ValueError: duplicate participant ids
    """
    entrants = list(participants)
    topology = BracketTopology.for_participants(len(entrants), format)

    if len({p.id for p in entrants}) != len(entrants):
        raise ValueError("Participant ids must be unique")

    if shuffle:
        entrants = shuffle_participants(entrants, rng)

    state = create_empty_bracket(topology)
    seed_first_round(state, entrants)
    byes = resolve_byes(state)
    state.current_match = state.find_next_match()

    logger.debug(
        "Generated %s bracket: %d entrants, size %d, %d byes resolved",
        topology.format.value, len(entrants), topology.bracket_size, len(byes),
    )
    return state
