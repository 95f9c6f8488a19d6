"""Pydantic models for catalog games."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

MIN_RELEASE_YEAR = 1970


def max_release_year() -> int:
    """Latest accepted release year, relative to today."""
    return datetime.now().year + 2


class Platform(str, Enum):
    PS5 = "PS5"
    XBOX = "Xbox"
    NINTENDO_SWITCH = "Nintendo Switch"
    PC = "PC"
    MOBILE = "Mobile"
    OTHER = "Other"


class GameStatus(str, Enum):
    NEW = "New"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    ON_HOLD = "On Hold"
    ABANDONED = "Abandoned"


class GameFields(BaseModel):
    """Shape of a game's user-editable fields: types and enums only.

    Stored games are decoded against this, so a record written under
    different form limits still loads.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str
    platform: Platform
    genre: str
    release_year: int = Field(..., alias="releaseYear")
    developer: str
    status: GameStatus = GameStatus.NEW
    rating: int | None = None
    playtime_hours: float | None = Field(None, alias="playtimeHours")
    completion_percentage: float | None = Field(None, alias="completionPercentage")
    notes: str | None = None


class GameFormData(GameFields):
    """Everything the user edits on a game, with the form's limits applied."""

    title: str = Field(..., min_length=1, max_length=100)
    genre: str = Field(..., min_length=1, max_length=50)
    release_year: int = Field(..., alias="releaseYear", ge=MIN_RELEASE_YEAR)
    developer: str = Field(..., min_length=1, max_length=100)
    rating: int | None = Field(None, ge=1, le=10)
    playtime_hours: float | None = Field(
        None, alias="playtimeHours", ge=0, allow_inf_nan=False
    )
    completion_percentage: float | None = Field(
        None, alias="completionPercentage", ge=0, le=100, allow_inf_nan=False
    )
    notes: str | None = Field(None, max_length=500)

    @field_validator(
        "release_year", "rating", "playtime_hours", "completion_percentage", mode="before"
    )
    @classmethod
    def _reject_booleans(cls, value: Any) -> Any:
        # bool is an int subclass; a checkbox value is not a number
        if isinstance(value, bool):
            raise PydanticCustomError(
                "not_a_number", "Input should be a number, not a boolean"
            )
        return value

    @field_validator("release_year")
    @classmethod
    def _release_year_not_too_far_ahead(cls, value: int) -> int:
        limit = max_release_year()
        if value > limit:
            raise ValueError(f"Release year cannot be later than {limit}")
        return value


class GameRecord(GameFields):
    """A stored game: the editable fields plus identity and creation time."""

    id: str = Field(..., min_length=1)
    date_added: str = Field(..., alias="dateAdded")


class GameListResponse(BaseModel):
    games: list[GameRecord]
    total: int
    count: int


class GameStats(BaseModel):
    total: int
    by_status: dict[str, int]
    rated: int
    average_rating: float
