"""
CharacterVault Services

Application services for event handling and tournament storage.
"""

from services.event_bus import EventBus
from services.participants import ParticipantDirectory
from services.tournament_store import TournamentStore

__all__ = ["EventBus", "ParticipantDirectory", "TournamentStore"]
