"""
Standings

Final placements for a completed bracket and a progress counter for
one in flight.
"""

from dataclasses import dataclass

from engine.bracket import BracketState, Participant, TournamentFormat
from engine.seeding import Liveness


@dataclass(frozen=True)
class Placement:
    """A participant's finishing place (ties share a place)."""
    place: int
    participant: Participant


def final_rankings(state: BracketState) -> list[Placement]:
    """
    Placements for a completed tournament, champion first.

    Single elimination ranks the champion, the runner-up and both
    semifinal losers (tied third). Double elimination ranks only the
    champion and the grand-final opponent.

    Raises:
        RuntimeError: if the tournament is not complete
    """
    if not state.is_complete or state.champion is None:
        raise RuntimeError("Tournament is not complete")

    rankings = [Placement(1, state.champion)]
    seen = {state.champion}

    final = state.terminal_match
    runner_up = final.opponent_of(state.champion) if final else None
    if runner_up is None and final is not None and final.is_bye and state.winners:
        # Two-entrant double elimination: the grand final was a bye
        runner_up = state.winners[-1][0].loser
    if runner_up is not None:
        rankings.append(Placement(2, runner_up))
        seen.add(runner_up)

    if state.format == TournamentFormat.SINGLE and len(state.winners) >= 2:
        for semi in state.winners[-2]:
            loser = semi.loser
            if loser is not None and loser not in seen:
                rankings.append(Placement(3, loser))
                seen.add(loser)

    return rankings


def tournament_progress(state: BracketState) -> tuple[int, int]:
    """
    (decided, total) counts of matches that need a human decision.

    Byes and cells that can never be filled are not counted.
    """
    liveness = Liveness(state)
    decided = 0
    total = 0
    for node in state.iter_matches():
        if node.is_bye or not liveness.is_contested(node):
            continue
        total += 1
        if node.winner is not None:
            decided += 1
    return decided, total
