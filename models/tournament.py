"""
Tournament model for bracket persistence.

A tournament row holds metadata (name, format, status, winner); its
bracket is stored as one TournamentMatch row per cell, exactly as
produced by engine.serialization.serialize().
"""

from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import String, Integer, DateTime, Text, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from engine.bracket import BracketType, TournamentFormat, TournamentStatus
from engine.serialization import MatchRecord
from models.base import Base

# Scan order used when reading matches back
BRACKET_ORDER = {
    BracketType.WINNERS: 0,
    BracketType.LOSERS: 1,
    BracketType.GRAND_FINAL: 2,
}


class Tournament(Base):
    """
    A saved character tournament.

    The bracket itself is the list of TournamentMatch rows; champion and
    current match are derived again when the bracket is rehydrated.
    """
    __tablename__ = "tournaments"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    format: Mapped[TournamentFormat] = mapped_column(SAEnum(TournamentFormat), nullable=False)
    status: Mapped[TournamentStatus] = mapped_column(
        SAEnum(TournamentStatus),
        default=TournamentStatus.IN_PROGRESS
    )

    # Free-form description of how entrants were selected
    filter_criteria: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Winner
    winner_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("characters.id", ondelete="SET NULL"),
        nullable=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc)
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Relationships
    matches: Mapped[list["TournamentMatch"]] = relationship(
        back_populates="tournament",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Tournament(id={self.id}, name='{self.name}', status={self.status})>"

    @property
    def match_count(self) -> int:
        """Matches that have at least a first participant."""
        return sum(1 for m in self.matches if m.character1_id is not None)

    def to_records(self) -> list[MatchRecord]:
        """Stored matches as engine records, in bracket scan order."""
        ordered = sorted(
            self.matches,
            key=lambda m: (BRACKET_ORDER[m.bracket], m.round, m.match_number)
        )
        return [m.to_record() for m in ordered]

    def replace_matches(self, records: Iterable[MatchRecord]) -> None:
        """Replace the stored bracket with a new set of records."""
        self.matches.clear()
        for record in records:
            self.matches.append(TournamentMatch.from_record(record))

    def update_status(self, status: TournamentStatus, winner_id: Optional[int]) -> None:
        """Set status and winner; completed_at is kept only while completed."""
        self.status = status
        self.winner_id = winner_id
        if status == TournamentStatus.COMPLETED:
            self.completed_at = datetime.now(timezone.utc)
        else:
            self.completed_at = None


class TournamentMatch(Base):
    """One stored bracket cell."""
    __tablename__ = "tournament_matches"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tournament_id: Mapped[int] = mapped_column(
        ForeignKey("tournaments.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    bracket: Mapped[BracketType] = mapped_column(
        SAEnum(BracketType),
        default=BracketType.WINNERS
    )
    round: Mapped[int] = mapped_column(Integer, nullable=False)
    match_number: Mapped[int] = mapped_column(Integer, nullable=False)

    # Participants
    character1_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("characters.id", ondelete="SET NULL"),
        nullable=True
    )
    character2_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("characters.id", ondelete="SET NULL"),
        nullable=True
    )
    winner_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("characters.id", ondelete="SET NULL"),
        nullable=True
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    tournament: Mapped["Tournament"] = relationship(back_populates="matches")

    def __repr__(self) -> str:
        return (
            f"<TournamentMatch(tournament={self.tournament_id}, "
            f"{self.bracket.value} R{self.round} M{self.match_number})>"
        )

    @classmethod
    def from_record(cls, record: MatchRecord) -> "TournamentMatch":
        return cls(
            bracket=record.bracket,
            round=record.round,
            match_number=record.match_number,
            character1_id=record.participant1_id,
            character2_id=record.participant2_id,
            winner_id=record.winner_id,
            completed_at=record.completed_at,
        )

    def to_record(self) -> MatchRecord:
        return MatchRecord(
            tournament_id=self.tournament_id,
            bracket=self.bracket,
            round=self.round,
            match_number=self.match_number,
            participant1_id=self.character1_id,
            participant2_id=self.character2_id,
            winner_id=self.winner_id,
            completed_at=self.completed_at,
        )
