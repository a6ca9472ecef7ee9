"""
Pydantic models for scorepad data that crosses the core boundary.

Field names are snake_case in Python and serialize by alias to the camelCase
keys of the persisted snapshot (``createdAt``, ``playerId`` ...).
"""

from datetime import datetime
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class Player(BaseModel):
    """A participant with a running score total."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    name: str = Field(min_length=1)
    score: int = 0
    created_at: datetime = Field(alias="createdAt")


class RoundEntry(BaseModel):
    """One immutable record of points awarded to one player."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    player_id: int = Field(alias="playerId")
    player_name: str = Field(alias="playerName")  # snapshot at entry time
    points: int
    timestamp: datetime
    round_number: int = Field(alias="roundNumber", ge=1)


class WizardProgress(NamedTuple):
    """1-based step and roster size, for display."""

    step: int
    total: int


PlayerList = TypeAdapter(list[Player])
RoundEntryList = TypeAdapter(list[RoundEntry])
