"""
Tests for saved tournaments and the character directory.

Run against an in-memory SQLite database per test.
"""

import pytest
from pydantic import ValidationError
from sqlalchemy import func, select

from engine.advancement import advance_current
from engine.bracket import TournamentFormat, TournamentStatus
from engine.seeding import generate_bracket
from engine.serialization import rehydrate, serialize
from models.base import get_session
from models.character import CharacterStatus
from models.tournament import TournamentMatch
from services.participants import ParticipantDirectory
from services.tournament_store import TournamentStore

from conftest import make_participants, play_out


@pytest.fixture
def store(session_factory):
    return TournamentStore(session_factory)


@pytest.fixture
def directory(session_factory):
    return ParticipantDirectory(session_factory)


def count_match_rows(session_factory) -> int:
    with get_session(session_factory) as session:
        return session.scalar(select(func.count()).select_from(TournamentMatch))


class TestCreateAndGet:
    """Tests for creating tournaments."""

    def test_create_returns_id(self, store):
        tournament_id = store.create_tournament("Favorites", TournamentFormat.DOUBLE, "all")
        detail = store.get_tournament(tournament_id)

        assert detail.id == tournament_id
        assert detail.name == "Favorites"
        assert detail.format == TournamentFormat.DOUBLE
        assert detail.status == TournamentStatus.IN_PROGRESS
        assert detail.filter_criteria == "all"
        assert detail.winner_id is None
        assert detail.completed_at is None
        assert detail.matches == []

    def test_name_is_trimmed(self, store):
        tournament_id = store.create_tournament("  Spaced  ", TournamentFormat.SINGLE)
        assert store.get_tournament(tournament_id).name == "Spaced"

    def test_blank_name_rejected(self, store):
        with pytest.raises(ValidationError):
            store.create_tournament("   ", TournamentFormat.SINGLE)

    def test_missing_tournament(self, store):
        assert store.get_tournament(999) is None


class TestSaveState:
    """Tests for storing bracket records."""

    def test_saved_records_rehydrate(self, store):
        tournament_id = store.create_tournament("Run", TournamentFormat.DOUBLE)
        state = generate_bracket(make_participants(6), TournamentFormat.DOUBLE)
        for _ in range(3):
            state = advance_current(state, state.current_node.participant1)

        store.save_state(tournament_id, serialize(state, tournament_id))
        detail = store.get_tournament(tournament_id)
        lookup = {p.id: p for p in make_participants(6)}

        assert [r.tournament_id for r in detail.matches] == [tournament_id] * len(detail.matches)
        assert rehydrate(detail.matches, lookup, detail.format) == state

    def test_save_replaces_rows(self, store, session_factory):
        tournament_id = store.create_tournament("Run", TournamentFormat.SINGLE)
        state = generate_bracket(make_participants(5))

        store.save_state(tournament_id, serialize(state, tournament_id))
        state = advance_current(state, state.current_node.participant1)
        store.save_state(tournament_id, serialize(state, tournament_id))

        assert count_match_rows(session_factory) == 7
        assert store.get_tournament(tournament_id).matches[0].winner_id == 1

    def test_completed_status(self, store):
        tournament_id = store.create_tournament("Run", TournamentFormat.SINGLE)
        state, _ = play_out(generate_bracket(make_participants(4)))

        store.save_state(
            tournament_id, serialize(state, tournament_id),
            status=TournamentStatus.COMPLETED, winner_id=state.champion.id,
        )
        detail = store.get_tournament(tournament_id)

        assert detail.status == TournamentStatus.COMPLETED
        assert detail.winner_id == state.champion.id
        assert detail.completed_at is not None

    def test_back_in_progress_clears_completion(self, store):
        tournament_id = store.create_tournament("Run", TournamentFormat.SINGLE)
        store.save_state(tournament_id, [], status=TournamentStatus.COMPLETED, winner_id=1)
        store.save_state(tournament_id, [], status=TournamentStatus.IN_PROGRESS)

        detail = store.get_tournament(tournament_id)
        assert detail.status == TournamentStatus.IN_PROGRESS
        assert detail.winner_id is None
        assert detail.completed_at is None

    def test_status_untouched_without_status(self, store):
        tournament_id = store.create_tournament("Run", TournamentFormat.SINGLE)
        store.save_state(tournament_id, [], status=TournamentStatus.COMPLETED, winner_id=1)
        store.save_state(tournament_id, [])

        assert store.get_tournament(tournament_id).status == TournamentStatus.COMPLETED

    def test_unknown_tournament(self, store):
        with pytest.raises(ValueError):
            store.save_state(42, [])


class TestListAndDelete:
    """Tests for browsing and removing saved tournaments."""

    def test_newest_first_with_match_count(self, store):
        first = store.create_tournament("First", TournamentFormat.SINGLE)
        second = store.create_tournament("Second", TournamentFormat.DOUBLE)
        records = serialize(generate_bracket(make_participants(5)), first)
        store.save_state(first, records)

        summaries = store.list_tournaments()

        assert [s.id for s in summaries] == [second, first]
        assert summaries[0].match_count == 0
        assert summaries[1].match_count == sum(1 for r in records if r.participant1_id is not None)

    def test_delete_cascades(self, store, session_factory):
        tournament_id = store.create_tournament("Gone", TournamentFormat.SINGLE)
        store.save_state(tournament_id, serialize(generate_bracket(make_participants(4)), tournament_id))

        assert store.delete_tournament(tournament_id)
        assert store.get_tournament(tournament_id) is None
        assert count_match_rows(session_factory) == 0

    def test_delete_unknown(self, store):
        assert not store.delete_tournament(5)


class TestParticipantDirectory:
    """Tests for looking up characters as participants."""

    def test_get_participants(self, directory):
        a = directory.add_character("Aria")
        b = directory.add_character("Bram", CharacterStatus.ACTIVE)

        found = directory.get_participants([a.id, b.id, 999])

        assert set(found) == {a.id, b.id}
        assert found[a.id].name == "Aria"
        assert found[b.id].details == {"status": "active"}

    def test_empty_ids(self, directory):
        assert directory.get_participants([]) == {}

    def test_list_by_status(self, directory):
        directory.add_character("Cleo", CharacterStatus.ACTIVE)
        directory.add_character("Ash", CharacterStatus.WAITING)
        directory.add_character("Bex", CharacterStatus.ACTIVE)

        assert [p.name for p in directory.list_participants()] == ["Ash", "Bex", "Cleo"]
        assert [p.name for p in directory.list_participants(CharacterStatus.ACTIVE)] == ["Bex", "Cleo"]

    def test_blank_name_rejected(self, directory):
        with pytest.raises(ValueError):
            directory.add_character("  ")
