"""
Participant Directory - looks up tournament entrants in the character library.
"""

from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from engine.bracket import Participant
from models.base import SessionLocal, get_session
from models.character import Character, CharacterStatus


class ParticipantDirectory:
    """Read-only view of characters as bracket participants."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory or SessionLocal

    def get_participants(self, ids: Iterable[int]) -> dict[int, Participant]:
        """
        Resolve character ids.

        Ids with no matching character are simply absent from the result.
        """
        ids = set(ids)
        if not ids:
            return {}

        with get_session(self.session_factory) as session:
            stmt = select(Character).where(Character.id.in_(ids))
            return {c.id: c.to_participant() for c in session.scalars(stmt).all()}

    def list_participants(self, status: Optional[CharacterStatus] = None) -> list[Participant]:
        """
        Characters eligible for a new tournament.

        Args:
            status: Only characters with this status; None for all
        """
        with get_session(self.session_factory) as session:
            stmt = select(Character).order_by(Character.name, Character.id)
            if status is not None:
                stmt = stmt.where(Character.status == status)
            return [c.to_participant() for c in session.scalars(stmt).all()]

    def add_character(self, name: str, status: CharacterStatus = CharacterStatus.WAITING) -> Participant:
        """Add a character to the library."""
        name = name.strip()
        if not name:
            raise ValueError("Name cannot be empty")

        with get_session(self.session_factory) as session:
            character = Character(name=name, status=status)
            session.add(character)
            session.flush()
            return character.to_participant()
