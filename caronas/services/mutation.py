"""
Field Mutation Builder

Describes field-level changes to a group document as a list of set/unset
operations on nested paths. The repository translates a Mutation into
MongoDB update syntax; nothing else builds dotted strings by hand.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from caronas.exceptions import InvalidFieldPathError


def _segment(value) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


@dataclass(frozen=True)
class FieldPath:
    """Path to a nested field, e.g. FieldPath(("going", "42", "full"))."""

    segments: tuple[str, ...]

    def __post_init__(self):
        if not self.segments:
            raise InvalidFieldPathError("Field path must have at least one segment")
        for segment in self.segments:
            if not segment or "." in segment or segment.startswith("$"):
                raise InvalidFieldPathError(f"Invalid path segment: {segment!r}")

    @classmethod
    def of(cls, *segments: Union[str, int]) -> "FieldPath":
        return cls(tuple(_segment(s) for s in segments))

    def child(self, segment: Union[str, int]) -> "FieldPath":
        return FieldPath(self.segments + (_segment(segment),))

    def dotted(self) -> str:
        return ".".join(self.segments)

    def __str__(self) -> str:
        return self.dotted()


@dataclass
class Mutation:
    """Ordered set of field assignments and removals."""

    sets: dict[FieldPath, Any] = field(default_factory=dict)
    unsets: list[FieldPath] = field(default_factory=list)

    def set_field(self, path: FieldPath, value: Any) -> "Mutation":
        self.sets[path] = value
        return self

    def unset_field(self, path: FieldPath) -> "Mutation":
        if path not in self.unsets:
            self.unsets.append(path)
        return self

    def is_empty(self) -> bool:
        return not self.sets and not self.unsets

    def to_update(self) -> dict:
        """Translate into a MongoDB update document ($set / $unset)."""
        update = {}
        if self.sets:
            update["$set"] = {path.dotted(): value for path, value in self.sets.items()}
        if self.unsets:
            update["$unset"] = {path.dotted(): "" for path in self.unsets}
        return update


def ride_path(direction: str, user_id: Union[int, str]) -> FieldPath:
    """Path of the ride a user holds in one direction of a group."""
    return FieldPath.of(direction, user_id)
