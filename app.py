"""
CharacterVault Application Controller

Top-level controller that wires together storage, the character
directory, the event bus and the active tournament session.
"""

import logging
import random
from typing import Optional

from PySide6.QtCore import QObject
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from config import TOURNAMENT_SETTINGS
from engine.bracket import TournamentFormat
from engine.errors import InsufficientParticipants
from engine.tournament_session import TournamentSession
from models.base import init_db
from models.character import CharacterStatus
from models.schemas import TournamentSummary
from services.event_bus import EventBus
from services.participants import ParticipantDirectory
from services.tournament_store import TournamentStore

logger = logging.getLogger(__name__)


class CharacterVaultApp(QObject):
    """
    Top-level application controller.
    Wires together all application components.
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        rng: Optional[random.Random] = None,
        create_tables: bool = True,
    ):
        super().__init__()

        # Initialize database
        if create_tables:
            init_db(session_factory.kw["bind"] if session_factory else None)

        # Core services
        self.event_bus = EventBus()
        self.store = TournamentStore(session_factory)
        self.directory = ParticipantDirectory(session_factory)
        self.rng = rng

        # Active tournament (one at a time)
        self.session: Optional[TournamentSession] = None

    def _activate(self, session: TournamentSession) -> TournamentSession:
        self.session = session
        self.event_bus.connect_session(session)
        self.event_bus.bracket_updated.emit(session.state)
        return session

    def start_tournament(
        self,
        name: Optional[str] = None,
        format: Optional[TournamentFormat] = None,
        status: Optional[CharacterStatus] = None,
        participant_ids: Optional[list[int]] = None,
        shuffle: Optional[bool] = None,
    ) -> TournamentSession:
        """
        Start a new tournament from the character library.

        Args:
            name: Tournament name (settings default if blank)
            format: SINGLE or DOUBLE (settings default if None)
            status: Only characters with this status
            participant_ids: Explicit entrants, overriding the status scope
            shuffle: Shuffle before seeding (settings default if None)

        Raises:
            InsufficientParticipants: fewer than two entrants selected
        """
        name = (name or "").strip() or TOURNAMENT_SETTINGS.default_name
        format = TournamentFormat(format or TOURNAMENT_SETTINGS.default_format)
        if shuffle is None:
            shuffle = TOURNAMENT_SETTINGS.shuffle_by_default

        if participant_ids is not None:
            lookup = self.directory.get_participants(participant_ids)
            participants = [lookup[pid] for pid in participant_ids if pid in lookup]
            criteria = "selected"
        else:
            participants = self.directory.list_participants(status)
            criteria = f"status:{status.value}" if status else "all"

        if len(participants) < TOURNAMENT_SETTINGS.min_participants:
            self.event_bus.emit_message("warning", "Need at least two characters for a tournament")
            raise InsufficientParticipants(len(participants))

        session = TournamentSession(
            name, participants, format,
            shuffle=shuffle, rng=self.rng, filter_criteria=criteria,
        )
        logger.info("Started '%s' (%s) with %d characters", name, format.value, len(participants))

        self._activate(session)
        self.event_bus.tournament_started.emit({
            "name": name,
            "format": format.value,
            "participant_count": len(participants),
        })
        return session

    def resume_tournament(self, tournament_id: int) -> TournamentSession:
        """
        Load a saved tournament and make it active.

        Raises:
            ValueError: if the tournament does not exist
        """
        session = TournamentSession.load(self.store, self.directory, tournament_id)
        self._activate(session)
        self.event_bus.tournament_resumed.emit(tournament_id)
        return session

    def save_active(self) -> Optional[int]:
        """
        Save the active tournament.

        Returns:
            Tournament id, or None if nothing is active or the save failed
        """
        if self.session is None:
            return None

        try:
            tournament_id = self.session.save(self.store)
        except SQLAlchemyError as e:
            logger.exception("Saving tournament failed")
            self.event_bus.database_error.emit(str(e))
            return None

        self.event_bus.emit_message("info", "Tournament saved")
        return tournament_id

    def list_tournaments(self) -> list[TournamentSummary]:
        return self.store.list_tournaments()

    def delete_tournament(self, tournament_id: int) -> bool:
        """Delete a saved tournament; the active session forgets its id."""
        deleted = self.store.delete_tournament(tournament_id)
        if deleted:
            if self.session is not None and self.session.tournament_id == tournament_id:
                self.session.tournament_id = None
            self.event_bus.tournament_deleted.emit(tournament_id)
        return deleted
