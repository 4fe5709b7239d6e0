"""
CharacterVault Bracket Engine

Pure, deterministic elimination-bracket logic for character tournaments.
Only tournament_session depends on Qt; everything else is plain Python.
"""

from engine.bracket import (
    BracketState,
    BracketType,
    MatchCoordinate,
    MatchNode,
    Participant,
    TournamentFormat,
    TournamentStatus,
)
from engine.errors import (
    BracketError,
    InsufficientParticipants,
    InvalidAdvancement,
    RehydrationMismatch,
)
from engine.topology import BracketTopology, get_bracket_info, next_power_of_two
from engine.seeding import generate_bracket, shuffle_participants
from engine.advancement import advance, advance_current
from engine.standings import Placement, final_rankings, tournament_progress
from engine.serialization import MatchRecord, rehydrate, serialize

__all__ = [
    "BracketState",
    "BracketType",
    "MatchCoordinate",
    "MatchNode",
    "Participant",
    "TournamentFormat",
    "TournamentStatus",
    "BracketError",
    "InsufficientParticipants",
    "InvalidAdvancement",
    "RehydrationMismatch",
    "BracketTopology",
    "get_bracket_info",
    "next_power_of_two",
    "generate_bracket",
    "shuffle_participants",
    "advance",
    "advance_current",
    "Placement",
    "final_rankings",
    "tournament_progress",
    "MatchRecord",
    "rehydrate",
    "serialize",
]
