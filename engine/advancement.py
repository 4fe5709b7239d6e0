"""
Match Advancement

Applies one human decision to a bracket and returns the resulting
state. The input state is never modified; every decision works on a
structural copy so hosts can keep earlier states for undo.
"""

import logging

from engine.bracket import (
    BracketState,
    BracketType,
    MatchCoordinate,
    Participant,
    TournamentFormat,
)
from engine.errors import InvalidAdvancement
from engine.routing import drop_loser, place_winner
from engine.seeding import resolve_byes

logger = logging.getLogger(__name__)


def advance(
    state: BracketState,
    coordinate: MatchCoordinate,
    winner: Participant,
) -> BracketState:
    """
    Record the winner of a match.

    The winner is routed to its next cell, a winners-bracket loser is
    dropped to the losers bracket in double elimination, pending byes
    are resolved and the current match is recomputed.

    Args:
        state: Bracket before the decision (left untouched)
        coordinate: The match being decided
        winner: One of the two contestants of that match

    Returns:
        The new BracketState

    Raises:
        InvalidAdvancement: unknown coordinate, match not ready or
            already decided, or winner not in the match
    """
    new_state = state.copy()
    match = new_state.get_match(coordinate)

    if match is None:
        raise InvalidAdvancement(f"No match at {coordinate}", coordinate)
    if match.winner is not None:
        raise InvalidAdvancement(f"Match {coordinate} is already decided", coordinate)
    if match.participant1 is None or match.participant2 is None:
        raise InvalidAdvancement(f"Match {coordinate} does not have two contestants", coordinate)
    if winner not in (match.participant1, match.participant2):
        raise InvalidAdvancement(f"{winner} is not playing in {coordinate}", coordinate)

    # Keep the bracket's own participant object, not the caller's copy
    winner = match.participant1 if match.participant1 == winner else match.participant2
    loser = match.opponent_of(winner)

    match.winner = winner
    place_winner(new_state, match, winner)

    if (
        match.bracket == BracketType.WINNERS
        and new_state.format == TournamentFormat.DOUBLE
        and match.round <= new_state.total_winners_rounds
    ):
        drop_loser(new_state, match.round, match.match_number, loser)

    resolve_byes(new_state)
    new_state.current_match = new_state.find_next_match()

    logger.debug("%s won %s; next match %s", winner, coordinate, new_state.current_match)
    return new_state


def advance_current(state: BracketState, winner: Participant) -> BracketState:
    """Decide the current match."""
    if state.current_match is None:
        raise InvalidAdvancement("There is no match waiting for a decision")
    return advance(state, state.current_match, winner)
