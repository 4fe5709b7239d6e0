"""
Shared fixtures: participant lists, an in-memory database and helpers
for playing a bracket to the end.
"""

import os

# Keep the module-level engine in models.base off the user's data dir
os.environ.setdefault("CHARACTERVAULT_DATABASE_URL", "sqlite://")

import pytest

from engine.advancement import advance_current
from engine.bracket import Participant
from models.base import Base, make_engine, make_session_factory
import models  # noqa: F401  (registers every table on Base.metadata)


def make_participants(n: int) -> list[Participant]:
    return [Participant(i, f"Character {i}") for i in range(1, n + 1)]


def play_out(state, pick=lambda node: node.participant1):
    """
    Decide matches until the bracket is complete.

    Returns:
        (final state, number of decisions made)
    """
    decisions = 0
    while state.current_match is not None:
        state = advance_current(state, pick(state.current_node))
        decisions += 1
    return state, decisions


@pytest.fixture
def participants():
    """Factory for n participants with ids 1..n."""
    return make_participants


@pytest.fixture
def db_engine():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return make_session_factory(db_engine)
