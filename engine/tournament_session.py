"""
Tournament Session

Host-side controller for one tournament run: keeps the current
BracketState, a history stack for undo, and the saved tournament id.
Emits Qt signals so the rest of the application can react without
polling.

Decisions are applied one at a time against the session's latest
state; the engine functions themselves are pure.
"""

import logging
import random
from typing import TYPE_CHECKING, Optional, Union

from PySide6.QtCore import QObject, Signal

from engine.advancement import advance
from engine.bracket import (
    BracketState,
    MatchCoordinate,
    Participant,
    TournamentFormat,
    TournamentStatus,
)
from engine.errors import InvalidAdvancement
from engine.seeding import generate_bracket
from engine.serialization import rehydrate, serialize
from engine.standings import Placement, final_rankings, tournament_progress

if TYPE_CHECKING:
    from services.participants import ParticipantDirectory
    from services.tournament_store import TournamentStore

logger = logging.getLogger(__name__)


class TournamentSession(QObject):
    """
    Runs a tournament between characters.

    Usage:
        session = TournamentSession("Favorites", participants, TournamentFormat.DOUBLE)
        session.pick_winner(session.current_node.participant1)
        session.undo()
        session.save(store)
    """

    # Signals
    bracket_updated = Signal(object)        # BracketState
    match_decided = Signal(dict)            # decision details
    match_undone = Signal(dict)             # decision that was undone
    tournament_completed = Signal(dict)     # champion details
    tournament_saved = Signal(int)          # tournament id

    def __init__(
        self,
        name: str,
        participants: list[Participant],
        format: TournamentFormat = TournamentFormat.SINGLE,
        shuffle: bool = True,
        rng: Optional[random.Random] = None,
        state: Optional[BracketState] = None,
        tournament_id: Optional[int] = None,
        filter_criteria: Optional[str] = None,
    ):
        """
        Start a session.

        Args:
            name: Tournament name
            participants: Entrants in seeding order
            format: SINGLE or DOUBLE elimination
            shuffle: Shuffle entrants before seeding
            rng: Random source for reproducible shuffles
            state: Resume from an existing bracket instead of generating one
            tournament_id: Id of the saved tournament, if any
            filter_criteria: How entrants were selected, stored on save
        """
        super().__init__()
        self.name = name
        self.participants = list(participants)
        self.format = TournamentFormat(format)
        self.tournament_id = tournament_id
        self.filter_criteria = filter_criteria
        self._rng = rng
        self._history: list[BracketState] = []

        if state is None:
            state = generate_bracket(self.participants, self.format, shuffle=shuffle, rng=rng)
        self._state = state

    @property
    def state(self) -> BracketState:
        return self._state

    @property
    def current_node(self):
        return self._state.current_node

    @property
    def is_complete(self) -> bool:
        return self._state.is_complete

    @property
    def can_undo(self) -> bool:
        return bool(self._history)

    @property
    def history_depth(self) -> int:
        return len(self._history)

    def _find_participant(self, winner: Union[Participant, int]) -> Participant:
        winner_id = winner if isinstance(winner, int) else winner.id
        node = self.current_node
        if node is not None:
            for p in node.participants:
                if p.id == winner_id:
                    return p
        return Participant(id=winner_id)

    def pick_winner(self, winner: Union[Participant, int]) -> BracketState:
        """
        Decide the current match.

        Args:
            winner: Participant or participant id of the chosen winner

        Raises:
            InvalidAdvancement: nothing to decide, or winner not in the match
        """
        if self._state.current_match is None:
            raise InvalidAdvancement("There is no match waiting for a decision")
        return self.decide(self._state.current_match, self._find_participant(winner))

    def decide(self, coordinate: MatchCoordinate, winner: Participant) -> BracketState:
        """Decide any ready match and push the previous state for undo."""
        new_state = advance(self._state, coordinate, winner)
        node = new_state.get_match(coordinate)

        self._history.append(self._state)
        self._state = new_state

        self.match_decided.emit({
            "bracket": coordinate.bracket.value,
            "round": coordinate.round,
            "match": coordinate.match,
            "winner_id": node.winner.id,
            "loser_id": node.loser.id if node.loser else None,
        })
        self.bracket_updated.emit(new_state)

        if new_state.is_complete:
            logger.info("Tournament '%s' won by %s", self.name, new_state.champion)
            self.tournament_completed.emit({
                "tournament_id": self.tournament_id,
                "champion_id": new_state.champion.id,
                "champion_name": new_state.champion.name,
            })
        return new_state

    def undo(self) -> Optional[BracketState]:
        """
        Return to the state before the last decision.

        Returns:
            The restored state, or None if there is nothing to undo
        """
        if not self._history:
            return None

        undone = self._state
        self._state = self._history.pop()

        coordinate = self._state.current_match
        self.match_undone.emit({
            "bracket": coordinate.bracket.value if coordinate else None,
            "round": coordinate.round if coordinate else None,
            "match": coordinate.match if coordinate else None,
            "was_complete": undone.is_complete,
        })
        self.bracket_updated.emit(self._state)
        return self._state

    def restart(self) -> BracketState:
        """Reshuffle the same entrants into a fresh bracket."""
        self._state = generate_bracket(self.participants, self.format, shuffle=True, rng=self._rng)
        self._history.clear()
        self.tournament_id = None
        self.bracket_updated.emit(self._state)
        return self._state

    def progress(self) -> tuple[int, int]:
        """(decided, total) human decisions."""
        return tournament_progress(self._state)

    def rankings(self) -> list[Placement]:
        """Final placements, empty until the tournament is complete."""
        if not self._state.is_complete:
            return []
        return final_rankings(self._state)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def save(self, store: "TournamentStore") -> int:
        """
        Persist the bracket, creating the tournament on first save.

        Returns:
            Tournament id
        """
        if self.tournament_id is None:
            self.tournament_id = store.create_tournament(
                self.name, self.format, filter_criteria=self.filter_criteria
            )

        status = TournamentStatus.COMPLETED if self.is_complete else TournamentStatus.IN_PROGRESS
        store.save_state(
            self.tournament_id,
            serialize(self._state, tournament_id=self.tournament_id),
            status=status,
            winner_id=self._state.champion.id if self._state.champion else None,
        )
        self.tournament_saved.emit(self.tournament_id)
        return self.tournament_id

    @classmethod
    def load(
        cls,
        store: "TournamentStore",
        directory: "ParticipantDirectory",
        tournament_id: int,
    ) -> "TournamentSession":
        """
        Resume a saved tournament.

        Raises:
            ValueError: if the tournament does not exist
        """
        detail = store.get_tournament(tournament_id)
        if detail is None:
            raise ValueError(f"Tournament {tournament_id} not found")

        ids = set()
        for record in detail.matches:
            ids.update(
                pid for pid in (record.participant1_id, record.participant2_id)
                if pid is not None
            )
        lookup = directory.get_participants(ids)
        state = rehydrate(detail.matches, lookup, detail.format)

        # Entrants are the occupants of the first winners round
        participants = [p for node in state.winners[0] for p in node.participants]

        return cls(
            detail.name,
            participants,
            detail.format,
            state=state,
            tournament_id=detail.id,
            filter_criteria=detail.filter_criteria,
        )
