"""
Tournament Store - saved tournaments in the application database.

Wraps the Tournament / TournamentMatch models behind a small API that
speaks engine records (MatchRecord) and pydantic schemas, so callers
never hold ORM objects outside a session.
"""

import logging
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from engine.bracket import TournamentFormat, TournamentStatus
from engine.serialization import MatchRecord
from models.base import SessionLocal, get_session
from models.schemas import TournamentCreate, TournamentDetail, TournamentSummary
from models.tournament import Tournament

logger = logging.getLogger(__name__)


class TournamentStore:
    """
    CRUD for saved tournaments.

    Usage:
        store = TournamentStore()
        tournament_id = store.create_tournament("Favorites", TournamentFormat.SINGLE)
        store.save_state(tournament_id, serialize(state, tournament_id))
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory or SessionLocal

    def create_tournament(
        self,
        name: str,
        format: TournamentFormat,
        filter_criteria: Optional[str] = None,
    ) -> int:
        """
        Create an empty in-progress tournament.

        Args:
            name: Display name
            format: SINGLE or DOUBLE elimination
            filter_criteria: How entrants were selected (free text)

        Returns:
            The new tournament id

        Raises:
            pydantic.ValidationError: if the name is blank
        """
        data = TournamentCreate(name=name, format=format, filter_criteria=filter_criteria)

        with get_session(self.session_factory) as session:
            tournament = Tournament(
                name=data.name,
                format=data.format,
                status=TournamentStatus.IN_PROGRESS,
                filter_criteria=data.filter_criteria,
            )
            session.add(tournament)
            session.flush()
            tournament_id = tournament.id

        logger.info("Created tournament %d '%s' (%s)", tournament_id, data.name, data.format.value)
        return tournament_id

    def save_state(
        self,
        tournament_id: int,
        records: Iterable[MatchRecord],
        status: Optional[TournamentStatus] = None,
        winner_id: Optional[int] = None,
    ) -> bool:
        """
        Replace the stored bracket of a tournament.

        All match rows are replaced in one transaction. When a status is
        given, the winner and completion time are updated with it.

        Raises:
            ValueError: if the tournament does not exist
        """
        records = list(records)

        with get_session(self.session_factory) as session:
            tournament = session.get(Tournament, tournament_id)
            if tournament is None:
                raise ValueError(f"Tournament {tournament_id} not found")

            tournament.replace_matches(records)
            if status is not None:
                tournament.update_status(TournamentStatus(status), winner_id)

        logger.info("Saved tournament %d (%d matches)", tournament_id, len(records))
        return True

    def get_tournament(self, tournament_id: int) -> Optional[TournamentDetail]:
        """Tournament metadata with its matches in bracket order, or None."""
        with get_session(self.session_factory) as session:
            tournament = session.get(Tournament, tournament_id)
            if tournament is None:
                return None

            return TournamentDetail(
                id=tournament.id,
                name=tournament.name,
                format=tournament.format,
                status=tournament.status,
                filter_criteria=tournament.filter_criteria,
                winner_id=tournament.winner_id,
                created_at=tournament.created_at,
                completed_at=tournament.completed_at,
                matches=tournament.to_records(),
            )

    def list_tournaments(self) -> list[TournamentSummary]:
        """All saved tournaments, newest first."""
        with get_session(self.session_factory) as session:
            stmt = select(Tournament).order_by(Tournament.created_at.desc(), Tournament.id.desc())
            return [
                TournamentSummary.model_validate(t)
                for t in session.scalars(stmt).all()
            ]

    def delete_tournament(self, tournament_id: int) -> bool:
        """
        Delete a tournament and its matches.

        Returns:
            False if it did not exist
        """
        with get_session(self.session_factory) as session:
            tournament = session.get(Tournament, tournament_id)
            if tournament is None:
                return False
            session.delete(tournament)

        logger.info("Deleted tournament %d", tournament_id)
        return True
