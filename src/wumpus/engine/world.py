"""Immutable data structures for the cave.

The map is built once at startup (or from a save file) and never changes
during play.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

PIT = "pit"


class MapError(ValueError):
    """Raised when a cave map is structurally inconsistent."""


@dataclass(frozen=True)
class Room:
    """A location in the cave."""

    number: int
    description: str = ""
    exits: Mapping[str, int] = field(default_factory=dict)
    hazards: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        # Freeze the exit table so the room stays immutable after construction.
        object.__setattr__(self, "exits", MappingProxyType(dict(self.exits)))
        object.__setattr__(self, "hazards", frozenset(self.hazards))

    @property
    def is_pit(self) -> bool:
        return PIT in self.hazards


class CaveMap:
    """A validated graph of rooms keyed by room number."""

    def __init__(self, rooms: Iterable[Room]):
        table: dict[int, Room] = {}
        for room in rooms:
            if room.number in table:
                raise MapError(f"Duplicate room number {room.number}")
            table[room.number] = room

        for room in table.values():
            for direction, target in room.exits.items():
                if target not in table:
                    raise MapError(
                        f"Room {room.number} exit {direction!r} leads to "
                        f"unknown room {target}"
                    )

        self.rooms: Mapping[int, Room] = MappingProxyType(table)

    def __getitem__(self, number: int) -> Room:
        return self.rooms[number]

    def __contains__(self, number: object) -> bool:
        return number in self.rooms

    def __iter__(self):
        return iter(self.rooms.values())

    def __len__(self) -> int:
        return len(self.rooms)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CaveMap):
            return NotImplemented
        return dict(self.rooms) == dict(other.rooms)

    def __repr__(self) -> str:
        return f"CaveMap(rooms={sorted(self.rooms)})"

    @property
    def pits(self) -> frozenset[int]:
        """Room numbers tagged with the pit hazard."""
        return frozenset(room.number for room in self if room.is_pit)


def default_cave() -> CaveMap:
    """Build the classic four-room cave."""
    return CaveMap(
        [
            Room(
                number=1,
                description="You're in a dark cave. Exits: north, east",
                exits={"north": 2, "east": 3},
            ),
            Room(
                number=2,
                description="Musty chamber. Exits: south, east",
                exits={"south": 1, "east": 4},
            ),
            Room(
                number=3,
                description="Damp tunnel. Exits: west, north",
                exits={"west": 1, "north": 4},
            ),
            Room(
                number=4,
                description="High ledge with a pit! Exit: south",
                exits={"south": 3},
                hazards=frozenset({PIT}),
            ),
        ]
    )
