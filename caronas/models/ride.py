"""Ride Model - Defines the per-group ride document for MongoDB persistence."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from caronas.utils.formatting import display_name as format_display_name
from caronas.utils.timezone_utils import as_utc


class Direction(str, Enum):
    """Ride direction inside a group."""
    GOING = "going"    # Shown as IDA
    COMING = "coming"  # Shown as VOLTA

    @property
    def label(self) -> str:
        return "IDA" if self is Direction.GOING else "VOLTA"


class RideState(int, Enum):
    """Values of the ride `full` flag."""
    OPEN = 0
    FULL = 1


class RideUser(BaseModel):
    """Telegram user who posted a ride. Identity key is `id`."""
    id: int
    first_name: str
    last_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return format_display_name(self.first_name, self.last_name)

    @classmethod
    def from_telegram(cls, user) -> "RideUser":
        """Build from a telegram.User, dropping the fields we do not store."""
        return cls(id=user.id, first_name=user.first_name, last_name=user.last_name)


class Ride(BaseModel):
    """
    A single ride posted in a group.

    Fields:
    - user: who posted it
    - time: departure instant, kept in UTC
    - description: free text (route, meeting point)
    - direction: going or coming
    - full: 0 while seats are open, 1 once marked full
    """
    user: RideUser
    time: datetime
    description: str = ""
    direction: Direction
    full: int = Field(default=RideState.OPEN.value, ge=0, le=1)

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("time")
    @classmethod
    def normalize_time(cls, value: datetime) -> datetime:
        return as_utc(value)

    @property
    def is_full(self) -> bool:
        return self.full == RideState.FULL


class GroupRides(BaseModel):
    """
    One document per chat group.

    Rides live in two maps, `going` and `coming`, keyed by the string form
    of the poster's user id, so each user holds at most one ride per direction.
    """
    chat_id: int = Field(..., alias="chatId")
    coming: dict[str, Ride] = Field(default_factory=dict)
    going: dict[str, Ride] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def rides(self) -> list[Ride]:
        """All rides of the group, coming first, in no particular order."""
        return list(self.coming.values()) + list(self.going.values())

    def entries(self) -> list[tuple[Direction, str, Ride]]:
        """(direction, stored user key, ride) for every ride in the document."""
        return [(Direction.COMING, key, ride) for key, ride in self.coming.items()] + [
            (Direction.GOING, key, ride) for key, ride in self.going.items()
        ]

    def is_empty(self) -> bool:
        return not self.coming and not self.going

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)
