"""
Bracket Routing

Where winners go, where winners-bracket losers drop, and which matches
feed each cell. The feeder map is the exact inverse of the routing
rules and is what bye resolution uses to tell a structurally empty
feeder from one that simply has not been played yet.

Loser drop-down (double elimination):
    winners round 1, match M  -> losers round 1, match M // 2
    winners round R > 1, M    -> losers round 2 * (R - 1), match M
"""

import logging
from typing import Optional

from engine.bracket import (
    BracketState,
    BracketType,
    MatchCoordinate,
    MatchNode,
    Participant,
    TournamentFormat,
)

logger = logging.getLogger(__name__)

# Feed kinds
WINNER_FEED = "winner"
LOSER_FEED = "loser"


def winners_advance_target(round_num: int, match_num: int) -> tuple[MatchCoordinate, int]:
    """Next winners-bracket cell and slot (1 or 2) for a winner."""
    slot = 1 if match_num % 2 == 0 else 2
    return MatchCoordinate(BracketType.WINNERS, round_num + 1, match_num // 2), slot


def losers_advance_target(round_num: int, match_num: int) -> MatchCoordinate:
    """Next losers-bracket cell for a losers-bracket winner."""
    if round_num % 2 == 1:
        # Minor round feeds the major round at the same index
        return MatchCoordinate(BracketType.LOSERS, round_num + 1, match_num)
    return MatchCoordinate(BracketType.LOSERS, round_num + 1, match_num // 2)


def loser_drop_target(winners_round: int, match_num: int) -> MatchCoordinate:
    """Losers-bracket cell that receives the loser of a winners match."""
    if winners_round == 1:
        return MatchCoordinate(BracketType.LOSERS, 1, match_num // 2)
    return MatchCoordinate(BracketType.LOSERS, 2 * (winners_round - 1), match_num)


def place_winner(state: BracketState, node: MatchNode, winner: Participant) -> None:
    """
    Route the winner of a decided match to its next cell.

    Mutates state, so it is only ever called on a copy. Also records the
    champion when the decided match is the terminal one.
    """
    if node.bracket == BracketType.WINNERS:
        if node.round < state.total_winners_rounds:
            target, slot = winners_advance_target(node.round, node.match_number)
            next_match = state.get_match(target)
            if slot == 1:
                next_match.participant1 = winner
            else:
                next_match.participant2 = winner
        elif state.format == TournamentFormat.SINGLE:
            _crown(state, winner)
        elif state.grand_final is not None:
            state.grand_final.participant1 = winner

    elif node.bracket == BracketType.LOSERS:
        if node.round < state.total_losers_rounds:
            next_match = state.get_match(losers_advance_target(node.round, node.match_number))
            if next_match is not None:
                next_match.place(winner)
        elif state.grand_final is not None:
            state.grand_final.participant2 = winner

    elif node.bracket == BracketType.GRAND_FINAL:
        # Single grand final, no bracket reset
        _crown(state, winner)


def _crown(state: BracketState, winner: Participant) -> None:
    state.champion = winner
    state.is_complete = True
    logger.debug("Champion decided: %s", winner)


def drop_loser(
    state: BracketState,
    winners_round: int,
    match_num: int,
    loser: Participant,
) -> Optional[MatchNode]:
    """
    Send a winners-bracket loser to the losers bracket.

    The loser takes the first empty slot of the target cell. Returns the
    target node, or None when the bracket has no such losers round.
    """
    target = loser_drop_target(winners_round, match_num)
    if target.round > state.total_losers_rounds:
        logger.debug(
            "No losers round %d for winners round %d; drop of %s skipped",
            target.round, winners_round, loser,
        )
        return None

    node = state.get_match(target)
    if node is None:
        logger.debug("Drop target %s does not exist", target)
        return None

    if not node.place(loser):
        logger.warning("Drop target %s already full; %s not placed", target, loser)
        return None

    logger.debug("Dropped %s to %s", loser, target)
    return node


def feeders(state: BracketState, node: MatchNode) -> list[tuple[str, MatchNode]]:
    """
    Matches that can deliver a contestant into this cell.

    Returns (feed kind, feeder node) pairs. Winners round 1 is seeded
    directly and has no feeders.
    """
    r, m = node.round, node.match_number
    refs: list[tuple[str, MatchCoordinate]] = []

    if node.bracket == BracketType.WINNERS:
        if r > 1:
            refs = [
                (WINNER_FEED, MatchCoordinate(BracketType.WINNERS, r - 1, 2 * m)),
                (WINNER_FEED, MatchCoordinate(BracketType.WINNERS, r - 1, 2 * m + 1)),
            ]

    elif node.bracket == BracketType.LOSERS:
        if r == 1:
            refs = [
                (LOSER_FEED, MatchCoordinate(BracketType.WINNERS, 1, 2 * m)),
                (LOSER_FEED, MatchCoordinate(BracketType.WINNERS, 1, 2 * m + 1)),
            ]
        elif r % 2 == 0:
            refs = [
                (WINNER_FEED, MatchCoordinate(BracketType.LOSERS, r - 1, m)),
                (LOSER_FEED, MatchCoordinate(BracketType.WINNERS, r // 2 + 1, m)),
            ]
        else:
            refs = [
                (WINNER_FEED, MatchCoordinate(BracketType.LOSERS, r - 1, 2 * m)),
                (WINNER_FEED, MatchCoordinate(BracketType.LOSERS, r - 1, 2 * m + 1)),
            ]

    elif node.bracket == BracketType.GRAND_FINAL:
        refs = [(WINNER_FEED, MatchCoordinate(BracketType.WINNERS, state.total_winners_rounds, 0))]
        if state.total_losers_rounds > 0:
            refs.append(
                (WINNER_FEED, MatchCoordinate(BracketType.LOSERS, state.total_losers_rounds, 0))
            )

    result = []
    for kind, coord in refs:
        feeder = state.get_match(coord)
        if feeder is not None:
            result.append((kind, feeder))
    return result
