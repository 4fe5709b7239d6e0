"""
Tests for the application controller and the console entry point.
"""

import io
import random
from unittest.mock import MagicMock

import pytest

from app import CharacterVaultApp
from engine.bracket import TournamentFormat
from engine.errors import InsufficientParticipants
from main import format_bracket, main
from models.character import CharacterStatus


@pytest.fixture
def app(session_factory):
    vault = CharacterVaultApp(session_factory, rng=random.Random(0))
    for name in ("Aria", "Bram", "Cleo", "Dax", "Eve"):
        vault.directory.add_character(name, CharacterStatus.ACTIVE)
    vault.directory.add_character("Finn", CharacterStatus.ARCHIVED)
    return vault


class TestCharacterVaultApp:
    """Tests for wiring sessions, storage and the event bus."""

    def test_start_with_status_scope(self, app):
        started = MagicMock()
        app.event_bus.tournament_started.connect(started)

        session = app.start_tournament("Active only", TournamentFormat.DOUBLE, CharacterStatus.ACTIVE)

        assert app.session is session
        assert len(session.participants) == 5
        assert session.filter_criteria == "status:active"
        started.assert_called_once_with({"name": "Active only", "format": "double", "participant_count": 5})

    def test_defaults(self, app):
        session = app.start_tournament()

        assert session.name == "Character Tournament"
        assert session.format == TournamentFormat.SINGLE
        assert len(session.participants) == 6
        assert session.filter_criteria == "all"

    def test_explicit_entrants(self, app):
        ids = [p.id for p in app.directory.list_participants()][:3]
        session = app.start_tournament("Trio", participant_ids=ids + [999], shuffle=False)

        assert [p.id for p in session.participants] == ids

    def test_too_few_entrants(self, app):
        message = MagicMock()
        app.event_bus.system_message.connect(message)

        with pytest.raises(InsufficientParticipants):
            app.start_tournament(participant_ids=[1])
        message.assert_called_once()

    def test_bus_relays_session_signals(self, app):
        decided = MagicMock()
        app.event_bus.match_decided.connect(decided)

        session = app.start_tournament(status=CharacterStatus.ACTIVE)
        session.pick_winner(session.current_node.participant1)

        decided.assert_called_once()

    def test_save_resume_delete(self, app):
        session = app.start_tournament("Keep", TournamentFormat.DOUBLE)
        session.pick_winner(session.current_node.participant1)

        tournament_id = app.save_active()
        assert [t.id for t in app.list_tournaments()] == [tournament_id]

        resumed = app.resume_tournament(tournament_id)
        assert resumed.state == session.state
        assert app.session is resumed

        deleted = MagicMock()
        app.event_bus.tournament_deleted.connect(deleted)
        assert app.delete_tournament(tournament_id)
        deleted.assert_called_once_with(tournament_id)
        assert app.session.tournament_id is None
        assert app.list_tournaments() == []

    def test_save_without_session(self, app):
        assert app.save_active() is None


class TestConsole:
    """Tests for the argparse entry point."""

    def run(self, app, *argv, stdin=""):
        out = io.StringIO()
        code = main(list(argv), stdin=io.StringIO(stdin), stdout=out, app=app)
        return code, out.getvalue()

    def test_run_to_completion(self, app):
        code, output = self.run(
            app, "run", "--name", "Cup", "--status", "active", "--no-shuffle",
            stdin="1\n" * 4,
        )

        assert code == 0
        assert "Champion: Aria" in output
        assert "1. Aria" in output
        assert app.session.is_complete

    def test_undo_and_quit(self, app):
        code, output = self.run(app, "run", "--format", "double", stdin="u\n1\nu\nq\n")

        assert code == 0
        assert "Nothing to undo" in output
        assert app.session.history_depth == 0
        assert "Saved as tournament" in output

    def test_list_show_delete(self, app):
        self.run(app, "run", "--name", "Listed", "--seed", "3", stdin="q\n")
        tournament_id = app.list_tournaments()[0].id

        code, output = self.run(app, "list")
        assert code == 0
        assert "Listed" in output

        code, output = self.run(app, "show", str(tournament_id))
        assert code == 0
        assert "Winners round 1:" in output

        code, output = self.run(app, "delete", str(tournament_id))
        assert code == 0
        assert app.list_tournaments() == []

    def test_show_unknown(self, app):
        code, output = self.run(app, "show", "404")

        assert code == 1
        assert "not found" in output

    def test_delete_unknown(self, app):
        code, _ = self.run(app, "delete", "404")
        assert code == 1

    def test_add_characters(self, app):
        code, output = self.run(app, "add", "Gus", "Hal", "--status", "active")

        assert code == 0
        assert "Gus" in output and "Hal" in output
        assert len(app.directory.list_participants(CharacterStatus.ACTIVE)) == 7

    def test_not_enough_characters(self, app):
        code, output = self.run(app, "run", "--ids", "1")

        assert code == 1
        assert "at least 2" in output


class TestFormatBracket:
    def test_marks_current_match(self, app):
        session = app.start_tournament(status=CharacterStatus.ACTIVE, shuffle=False)
        text = format_bracket(session.state)

        assert " * Aria vs Bram" in text
        assert "Losers" not in text
