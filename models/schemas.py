"""
Pydantic schemas for data validation.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from engine.bracket import TournamentFormat, TournamentStatus
from engine.serialization import MatchRecord


# ============ Tournament Schemas ============

class TournamentCreate(BaseModel):
    """Schema for creating a new tournament."""
    name: str = Field(..., min_length=1, max_length=200)
    format: TournamentFormat = TournamentFormat.SINGLE
    filter_criteria: Optional[str] = Field(None, max_length=2000)

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


class TournamentSummary(BaseModel):
    """Schema for tournament list entries."""
    id: int
    name: str
    format: TournamentFormat
    status: TournamentStatus
    winner_id: Optional[int]
    created_at: datetime
    completed_at: Optional[datetime]
    match_count: int

    class Config:
        from_attributes = True


class TournamentDetail(BaseModel):
    """Schema for a tournament with its stored bracket."""
    id: int
    name: str
    format: TournamentFormat
    status: TournamentStatus
    filter_criteria: Optional[str]
    winner_id: Optional[int]
    created_at: datetime
    completed_at: Optional[datetime]
    matches: list[MatchRecord] = Field(default_factory=list)
