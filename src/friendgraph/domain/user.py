"""User record and its plain-data bulk load/dump shape.

INVARIANT: A user's ``id`` equals its position in the engine's collection.
IDs are permanent; users are never removed, only their connections.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, Field


class UserRecord(BaseModel):
    """Plain-data shape of one user, as loaded from or dumped to storage."""

    model_config = {"frozen": True}

    id: int = Field(ge=0)
    name: str
    year: int
    zip: int
    friends: list[int] = Field(default_factory=list)


@dataclass
class User:
    """One person in the network and their adjacency set."""

    id: int
    name: str
    year: int
    zip: int
    friends: set[int] = field(default_factory=set)

    def add_friend(self, friend_id: int) -> None:
        self.friends.add(friend_id)

    def delete_friend(self, friend_id: int) -> None:
        self.friends.discard(friend_id)

    def is_friend(self, friend_id: int) -> bool:
        return friend_id in self.friends

    def to_record(self) -> UserRecord:
        """Return the dump shape, friends in ascending order."""
        return UserRecord(
            id=self.id,
            name=self.name,
            year=self.year,
            zip=self.zip,
            friends=sorted(self.friends),
        )

    @classmethod
    def from_record(cls, record: UserRecord) -> User:
        return cls(
            id=record.id,
            name=record.name,
            year=record.year,
            zip=record.zip,
            friends=set(record.friends),
        )
