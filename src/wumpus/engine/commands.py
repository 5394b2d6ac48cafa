"""Command parsing and the game's transition rules.

parse_command(raw_input) -> Command turns a console line into a closed
set of command kinds. move() and shoot() mutate state in place and return
a TurnResult carrying the outcome and the text to show the player.
"""

import enum
import random
from dataclasses import dataclass, field

from ..logging import get_logger
from .state import GameState

logger = get_logger(__name__)

INVALID_DIRECTION = "Invalid direction!"
STENCH_WARNING = "You smell a terrible stench!"
BREEZE_WARNING = "You feel a breeze!"


class CommandKind(enum.Enum):
    MOVE = "move"
    SHOOT = "shoot"
    ASK = "ask"
    PLAY = "play"
    SAVE = "save"
    QUIT = "quit"
    UNKNOWN = "unknown"


class Outcome(enum.Enum):
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self is not Outcome.PLAYING


@dataclass(frozen=True)
class Command:
    kind: CommandKind
    direction: str | None = None


@dataclass
class TurnResult:
    outcome: Outcome = Outcome.PLAYING
    messages: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(self.messages)


# Commands that take a direction argument.
DIRECTED = {CommandKind.MOVE, CommandKind.SHOOT}


def parse_command(raw_input: str | None) -> Command:
    """Parse a console line such as ``move``, ``shoot north`` or ``quit``."""
    raw = (raw_input or "").strip()
    words = raw.lower().split()
    if not words:
        return Command(CommandKind.UNKNOWN)

    try:
        kind = CommandKind(words[0])
    except ValueError:
        return Command(CommandKind.UNKNOWN)
    if kind is CommandKind.UNKNOWN:
        return Command(CommandKind.UNKNOWN)

    direction = words[1] if kind in DIRECTED and len(words) > 1 else None
    return Command(kind, direction=direction)


def normalize_direction(direction: str | None) -> str:
    return (direction or "").strip().lower()


def move_wumpus(state: GameState, rng: random.Random) -> int:
    """Step the Wumpus to a random neighbouring room. Returns its new room."""
    exits = list(state.cave[state.wumpus_location].exits.values())
    if exits:
        old = state.wumpus_location
        state.wumpus_location = rng.choice(exits)
        logger.debug("wumpus_moved", old_room=old, new_room=state.wumpus_location)
    return state.wumpus_location


def move(state: GameState, direction: str | None, rng: random.Random) -> TurnResult:
    """Walk the player through an exit of the current room."""
    player = state.player
    target = state.current_room.exits.get(normalize_direction(direction))
    if target is None:
        return TurnResult(messages=[INVALID_DIRECTION])

    if state.cave[target].is_pit:
        logger.info("player_lost", cause="pit", room=target)
        return TurnResult(Outcome.LOST, ["You fell into a pit! Game Over."])
    if target == state.wumpus_location:
        logger.info("player_lost", cause="wumpus", room=target)
        return TurnResult(Outcome.LOST, ["You walked into the Wumpus! Game Over."])

    logger.debug("player_moved", old_room=player.current_room, new_room=target)
    player.current_room = target
    move_wumpus(state, rng)
    return TurnResult()


def shoot(state: GameState, direction: str | None, rng: random.Random) -> TurnResult:
    """Fire an arrow into a neighbouring room.

    The zero-arrow guard runs first, so shooting an unknown direction with
    an empty quiver reports "Out of arrows!". Arrows are only spent on a
    valid direction.
    """
    player = state.player
    if player.arrows <= 0:
        return TurnResult(messages=["Out of arrows!"])

    target = state.current_room.exits.get(normalize_direction(direction))
    if target is None:
        return TurnResult(messages=[INVALID_DIRECTION])

    player.arrows -= 1
    logger.debug("arrow_shot", room=target, arrows_left=player.arrows)
    if target == state.wumpus_location:
        logger.info("player_won", room=target)
        return TurnResult(Outcome.WON, ["You killed the Wumpus! You win!"])

    move_wumpus(state, rng)
    return TurnResult(messages=["Missed! The Wumpus growls nearby..."])


def warnings(state: GameState) -> list[str]:
    """Sensory hints about the rooms adjacent to the player."""
    messages = []
    for neighbour in state.current_room.exits.values():
        if neighbour == state.wumpus_location:
            messages.append(STENCH_WARNING)
        if neighbour in state.pits:
            messages.append(BREEZE_WARNING)
    return messages


def get_exits(state: GameState) -> list[str]:
    """Direction names leading out of the player's room."""
    return list(state.current_room.exits)


def get_room_description(state: GameState) -> str:
    return state.current_room.description
