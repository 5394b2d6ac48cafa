"""Mutable game state.

The cave map is shared, immutable data; everything else here changes as
the player moves and shoots.
"""

from dataclasses import dataclass, field

from .world import CaveMap, MapError, Room, default_cave

START_ROOM = 1
WUMPUS_START_ROOM = 2
STARTING_ARROWS = 3
STARTING_HEALTH = 100


@dataclass
class Player:
    """The adventurer."""

    name: str
    current_room: int = START_ROOM
    arrows: int = STARTING_ARROWS
    health: int = STARTING_HEALTH  # never decremented
    inventory: list[str] = field(default_factory=list)


@dataclass
class GameState:
    """Everything needed to resume a game."""

    cave: CaveMap
    players: list[Player]
    wumpus_location: int

    def __post_init__(self) -> None:
        if not self.players:
            raise MapError("A game needs at least one player")
        for player in self.players:
            if player.current_room not in self.cave:
                raise MapError(
                    f"Player {player.name!r} is in unknown room {player.current_room}"
                )
        if self.wumpus_location not in self.cave:
            raise MapError(f"Wumpus is in unknown room {self.wumpus_location}")

    @property
    def player(self) -> Player:
        """The active player. Only one player ever takes turns."""
        return self.players[0]

    @property
    def pits(self) -> frozenset[int]:
        return self.cave.pits

    @property
    def current_room(self) -> Room:
        return self.cave[self.player.current_room]


def new_game_state(player_name: str, cave: CaveMap | None = None) -> GameState:
    """Create a fresh game in the default (or given) cave."""
    return GameState(
        cave=cave if cave is not None else default_cave(),
        players=[Player(name=player_name)],
        wumpus_location=WUMPUS_START_ROOM,
    )
