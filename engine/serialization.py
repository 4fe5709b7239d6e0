"""
Bracket Serialization

Flattens a BracketState into ordered match records for storage and
rebuilds an equivalent state from them. Byes, champion, completion and
the current match are derived again on the way back in.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, Mapping, Optional

from pydantic import BaseModel, Field, model_validator

from engine.bracket import (
    BracketState,
    BracketType,
    MatchNode,
    Participant,
    TournamentFormat,
)
from engine.errors import RehydrationMismatch

logger = logging.getLogger(__name__)


class MatchRecord(BaseModel):
    """Flat, storable form of one bracket cell."""
    tournament_id: Optional[int] = None
    bracket: BracketType
    round: int = Field(..., ge=1)
    match_number: int = Field(..., ge=0)
    participant1_id: Optional[int] = None
    participant2_id: Optional[int] = None
    winner_id: Optional[int] = None
    completed_at: Optional[datetime] = None

    @model_validator(mode="after")
    def grand_final_position(self) -> "MatchRecord":
        if self.bracket == BracketType.GRAND_FINAL and (self.round, self.match_number) != (1, 0):
            raise ValueError("Grand final must be round 1, match 0")
        return self


def _node_to_record(
    node: MatchNode,
    tournament_id: Optional[int],
    completed_at: datetime,
) -> MatchRecord:
    return MatchRecord(
        tournament_id=tournament_id,
        bracket=node.bracket,
        round=node.round,
        match_number=node.match_number,
        participant1_id=node.participant1.id if node.participant1 else None,
        participant2_id=node.participant2.id if node.participant2 else None,
        winner_id=node.winner.id if node.winner else None,
        completed_at=completed_at if node.winner else None,
    )


def serialize(
    state: BracketState,
    tournament_id: Optional[int] = None,
    completed_at: Optional[datetime] = None,
) -> list[MatchRecord]:
    """
    Flatten a bracket to records: winners rounds, losers rounds, grand final.

    Args:
        state: The bracket to flatten
        tournament_id: Stamped on every record when given
        completed_at: Timestamp for decided matches (default: now, UTC)
    """
    stamp = completed_at or datetime.now(timezone.utc)
    return [_node_to_record(node, tournament_id, stamp) for node in state.iter_matches()]


def _log_mismatch(mismatch: RehydrationMismatch) -> None:
    logger.warning("Rehydration skipped a slot: %s", mismatch)


def rehydrate(
    records: Iterable[MatchRecord],
    lookup: Mapping[int, Participant],
    format: TournamentFormat,
    on_mismatch: Optional[Callable[[RehydrationMismatch], None]] = None,
) -> BracketState:
    """
    Rebuild a BracketState from stored match records.

    Args:
        records: Records as produced by serialize(), in any order
        lookup: Participant id -> Participant
        format: Tournament format the records were saved with
        on_mismatch: Called for every id missing from lookup
            (default: log a warning); the slot is left empty

    Returns:
        The reconstructed BracketState

    Raises:
        ValueError: if there are no winners bracket records
    """
    format = TournamentFormat(format)
    report = on_mismatch or _log_mismatch

    by_bracket: dict[BracketType, dict[int, list[MatchRecord]]] = {
        BracketType.WINNERS: {},
        BracketType.LOSERS: {},
        BracketType.GRAND_FINAL: {},
    }
    for record in records:
        by_bracket[record.bracket].setdefault(record.round, []).append(record)

    if not by_bracket[BracketType.WINNERS]:
        raise ValueError("No winners bracket records to rehydrate")

    def resolve(record: MatchRecord, field_name: str) -> Optional[Participant]:
        participant_id = getattr(record, field_name)
        if participant_id is None:
            return None
        participant = lookup.get(participant_id)
        if participant is None:
            report(RehydrationMismatch(record, participant_id, field_name))
        return participant

    def build(record: MatchRecord) -> MatchNode:
        node = MatchNode(
            bracket=record.bracket,
            round=record.round,
            match_number=record.match_number,
            participant1=resolve(record, "participant1_id"),
            participant2=resolve(record, "participant2_id"),
            winner=resolve(record, "winner_id"),
        )
        present = [pid for pid in (record.participant1_id, record.participant2_id) if pid is not None]
        node.is_bye = len(present) == 1 and record.winner_id is not None
        return node

    def build_rounds(rounds: dict[int, list[MatchRecord]]) -> list[list[MatchNode]]:
        if not rounds:
            return []
        return [
            [build(r) for r in sorted(rounds.get(round_num, []), key=lambda r: r.match_number)]
            for round_num in range(1, max(rounds) + 1)
        ]

    winners = build_rounds(by_bracket[BracketType.WINNERS])
    losers = build_rounds(by_bracket[BracketType.LOSERS])

    grand_final = None
    grand_final_records = by_bracket[BracketType.GRAND_FINAL].get(1)
    if grand_final_records:
        grand_final = build(grand_final_records[0])

    state = BracketState(
        winners=winners,
        losers=losers,
        grand_final=grand_final,
        current_match=None,
        total_winners_rounds=len(winners),
        total_losers_rounds=len(losers),
        format=format,
    )

    terminal = state.terminal_match
    if terminal is not None and terminal.winner is not None:
        state.champion = terminal.winner
        state.is_complete = True

    state.current_match = state.find_next_match()
    return state
