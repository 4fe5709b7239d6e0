"""
Tests for the alembic schema migration.

Applies the initial revision to an empty in-memory database and checks
that the ORM models work against the migrated schema.
"""

import importlib.util
from pathlib import Path

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import inspect

from engine.bracket import TournamentFormat
from engine.seeding import generate_bracket
from engine.serialization import serialize
from models.base import make_engine, make_session_factory
from services.participants import ParticipantDirectory
from services.tournament_store import TournamentStore

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations" / "versions"


def load_revision(filename: str):
    module_spec = importlib.util.spec_from_file_location(filename[:-3], MIGRATIONS_DIR / filename)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


@pytest.fixture
def initial():
    return load_revision("20261018_0001_001_initial_schema.py")


@pytest.fixture
def migrated_engine(initial):
    engine = make_engine("sqlite://")
    with engine.begin() as conn:
        with Operations.context(MigrationContext.configure(conn)):
            initial.upgrade()
    yield engine
    engine.dispose()


class TestInitialSchema:
    def test_revision_ids(self, initial):
        assert initial.revision == "001"
        assert initial.down_revision is None

    def test_upgrade_creates_tables(self, migrated_engine):
        inspector = inspect(migrated_engine)

        assert set(inspector.get_table_names()) == {"characters", "tournaments", "tournament_matches"}
        columns = {c["name"] for c in inspector.get_columns("tournament_matches")}
        assert columns == {
            "id", "tournament_id", "bracket", "round", "match_number",
            "character1_id", "character2_id", "winner_id", "completed_at",
        }

    def test_models_work_on_migrated_schema(self, migrated_engine):
        factory = make_session_factory(migrated_engine)
        directory = ParticipantDirectory(factory)
        store = TournamentStore(factory)
        roster = [directory.add_character(name) for name in ("Ivy", "Jun", "Kai")]

        tournament_id = store.create_tournament("Migrated", TournamentFormat.DOUBLE)
        state = generate_bracket(roster, TournamentFormat.DOUBLE)
        store.save_state(tournament_id, serialize(state, tournament_id))

        detail = store.get_tournament(tournament_id)
        assert detail.format == TournamentFormat.DOUBLE
        assert len(detail.matches) == len(list(state.iter_matches()))

    def test_downgrade_drops_everything(self, initial, migrated_engine):
        with migrated_engine.begin() as conn:
            with Operations.context(MigrationContext.configure(conn)):
                initial.downgrade()

        assert inspect(migrated_engine).get_table_names() == []
