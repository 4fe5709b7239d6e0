"""
Event Bus - Central signal hub for inter-module communication.

Sessions, the store and any front end connect to this single object rather
than directly to each other.
"""

from PySide6.QtCore import QObject, Signal


class EventBus(QObject):
    """
    Central signal hub for CharacterVault.

    Usage:
        # In the application controller
        session.match_decided.connect(self.event_bus.match_decided.emit)

        # In a bracket view
        self.event_bus.bracket_updated.connect(self._on_bracket_updated)
    """

    # ============ Tournament Lifecycle ============
    tournament_started = Signal(dict)       # {name, format, participant_count}
    tournament_resumed = Signal(int)        # tournament_id
    tournament_completed = Signal(dict)     # {tournament_id, champion_id, champion_name}
    tournament_saved = Signal(int)          # tournament_id
    tournament_deleted = Signal(int)        # tournament_id

    # ============ Bracket Events ============
    bracket_updated = Signal(object)        # BracketState
    match_decided = Signal(dict)            # {bracket, round, match, winner_id, loser_id}
    match_undone = Signal(dict)             # {bracket, round, match, was_complete}

    # ============ System Events ============
    database_error = Signal(str)            # Database error message
    system_message = Signal(str, str)       # (level, message) - e.g., ("info", "Tournament saved")

    def __init__(self):
        super().__init__()

    def emit_message(self, level: str, message: str) -> None:
        """Emit a system message (info, warning, error)."""
        self.system_message.emit(level, message)

    def connect_session(self, session) -> None:
        """Relay a TournamentSession's signals through the bus."""
        session.bracket_updated.connect(self.bracket_updated.emit)
        session.match_decided.connect(self.match_decided.emit)
        session.match_undone.connect(self.match_undone.emit)
        session.tournament_completed.connect(self.tournament_completed.emit)
        session.tournament_saved.connect(self.tournament_saved.emit)

