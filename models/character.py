"""
Character model: the roster entries that compete in tournaments.

Only the columns the tournament feature reads are mapped here; the
rest of the character library (tags, groups, images) lives elsewhere.
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from engine.bracket import Participant
from models.base import Base


class CharacterStatus(enum.Enum):
    """Library status of a character."""
    WAITING = "waiting"
    ACTIVE = "active"
    ARCHIVED = "archived"


class Character(Base):
    """A character in the roster."""
    __tablename__ = "characters"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[CharacterStatus] = mapped_column(
        SAEnum(CharacterStatus),
        default=CharacterStatus.WAITING
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc)
    )

    def __repr__(self) -> str:
        return f"<Character(id={self.id}, name='{self.name}')>"

    def to_participant(self) -> Participant:
        """Bracket identity for this character."""
        return Participant(
            id=self.id,
            name=self.name,
            details={"status": self.status.value if self.status else None},
        )
