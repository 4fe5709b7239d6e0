"""
CharacterVault Database Models

SQLAlchemy ORM models for characters and saved tournaments.
"""

from models.base import Base, engine, SessionLocal, get_session, init_db
from models.character import Character, CharacterStatus
from models.tournament import Tournament, TournamentMatch

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "get_session",
    "init_db",
    "Character",
    "CharacterStatus",
    "Tournament",
    "TournamentMatch",
]
