"""
CharacterVault - Character Tournament Console

Entry point for the application. Lists, shows and deletes saved
tournaments, and runs a tournament interactively from stdin picks.
"""

import argparse
import random
import sys
from typing import Optional, TextIO

from config import init_config, APP_NAME, APP_VERSION, TOURNAMENT_SETTINGS
from engine.bracket import BracketState, TournamentFormat
from engine.errors import BracketError
from models.character import CharacterStatus


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=APP_NAME.lower(), description="Character tournaments")
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("list", help="List saved tournaments")

    show = commands.add_parser("show", help="Print a saved bracket")
    show.add_argument("tournament_id", type=int)

    delete = commands.add_parser("delete", help="Delete a saved tournament")
    delete.add_argument("tournament_id", type=int)

    add = commands.add_parser("add", help="Add characters to the library")
    add.add_argument("names", nargs="+")
    add.add_argument("--status", choices=[s.value for s in CharacterStatus], default="waiting")

    run = commands.add_parser("run", help="Run a tournament, reading picks from stdin")
    run.add_argument("--resume", type=int, metavar="ID", help="Continue a saved tournament")
    run.add_argument("--name", default=TOURNAMENT_SETTINGS.default_name)
    run.add_argument(
        "--format",
        choices=[f.value for f in TournamentFormat],
        default=TOURNAMENT_SETTINGS.default_format,
    )
    run.add_argument("--status", choices=[s.value for s in CharacterStatus], help="Only characters with this status")
    run.add_argument("--ids", type=int, nargs="+", metavar="ID", help="Explicit entrants")
    run.add_argument("--no-shuffle", action="store_true", help="Seed in library order")
    run.add_argument("--seed", type=int, help="Random seed for the shuffle")

    return parser


def format_bracket(state: BracketState) -> str:
    """Plain-text rendering of every round."""
    lines = []
    sections = [("Winners", state.winners), ("Losers", state.losers)]
    if state.grand_final is not None:
        sections.append(("Grand Final", [[state.grand_final]]))

    for title, rounds in sections:
        for round_index, matches in enumerate(rounds, start=1):
            if not matches:
                continue
            lines.append(f"{title} round {round_index}:")
            for node in matches:
                marker = "*" if node.coordinate == state.current_match else " "
                lines.append(f" {marker} {node}")

    if state.is_complete:
        lines.append(f"Champion: {state.champion}")
    return "\n".join(lines)


def run_session(app, session, stdin: TextIO, stdout: TextIO) -> None:
    """
    Drive a session from stdin.

    Commands: "1" or "2" pick that side, "u" undo, "s" save, "q" save and quit.
    """
    while True:
        node = session.current_node
        if node is None:
            break

        decided, total = session.progress()
        stdout.write(f"[{decided + 1}/{total}] {node.participant1} vs {node.participant2}\n> ")
        stdout.flush()

        line = stdin.readline()
        if not line:
            break
        choice = line.strip().lower()

        if choice in ("1", "2"):
            winner = node.participant1 if choice == "1" else node.participant2
            session.pick_winner(winner)
        elif choice == "u":
            if session.undo() is None:
                stdout.write("Nothing to undo\n")
        elif choice == "s":
            stdout.write(f"Saved as tournament {app.save_active()}\n")
        elif choice == "q":
            break
        else:
            stdout.write("Pick 1 or 2, u to undo, s to save, q to quit\n")

    tournament_id = app.save_active()
    if session.is_complete:
        stdout.write(f"Champion: {session.state.champion}\n")
        for placement in session.rankings():
            stdout.write(f"  {placement.place}. {placement.participant}\n")
    stdout.write(f"Saved as tournament {tournament_id}\n")


def main(
    argv: Optional[list[str]] = None,
    stdin: TextIO = sys.stdin,
    stdout: TextIO = sys.stdout,
    app=None,
) -> int:
    """Main entry point for CharacterVault."""
    args = build_parser().parse_args(argv)

    if app is None:
        # Initialize configuration and directories
        init_config()

        from app import CharacterVaultApp
        app = CharacterVaultApp()

    if args.command == "list":
        for t in app.list_tournaments():
            stdout.write(
                f"{t.id:>4}  {t.name}  {t.format.value}  {t.status.value}  "
                f"{t.match_count} matches  {t.created_at:%Y-%m-%d %H:%M}\n"
            )
        return 0

    if args.command == "show":
        try:
            session = app.resume_tournament(args.tournament_id)
        except ValueError as e:
            stdout.write(f"{e}\n")
            return 1
        stdout.write(format_bracket(session.state) + "\n")
        return 0

    if args.command == "delete":
        if not app.delete_tournament(args.tournament_id):
            stdout.write(f"Tournament {args.tournament_id} not found\n")
            return 1
        stdout.write(f"Deleted tournament {args.tournament_id}\n")
        return 0

    if args.command == "add":
        for name in args.names:
            p = app.directory.add_character(name, CharacterStatus(args.status))
            stdout.write(f"{p.id:>4}  {p.name}\n")
        return 0

    # run
    if args.seed is not None:
        app.rng = random.Random(args.seed)

    try:
        if args.resume is not None:
            session = app.resume_tournament(args.resume)
        else:
            session = app.start_tournament(
                name=args.name,
                format=TournamentFormat(args.format),
                status=CharacterStatus(args.status) if args.status else None,
                participant_ids=args.ids,
                shuffle=not args.no_shuffle,
            )
    except (BracketError, ValueError) as e:
        stdout.write(f"{e}\n")
        return 1

    run_session(app, session, stdin, stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
