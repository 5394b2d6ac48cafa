"""Whole-game save files.

A save is one indented JSON document holding the cave, the players and
the Wumpus. Field names are matched case-insensitively on load (and
underscores are ignored), so ``current_room_id`` and ``CurrentRoomId``
both work.
"""

import json
from pathlib import Path
from typing import Any

from .engine.state import STARTING_ARROWS, STARTING_HEALTH, GameState, Player
from .engine.world import CaveMap, MapError, Room
from .logging import get_logger

logger = get_logger(__name__)

DEFAULT_SAVE_FILE = Path("save.json")


class SaveError(ValueError):
    """Raised when a save file cannot be read back into a game."""


def state_to_dict(state: GameState) -> dict[str, Any]:
    """Serialize a game into plain JSON-compatible data."""
    return {
        "map": {
            "rooms": {
                str(room.number): {
                    "id": room.number,
                    "description": room.description,
                    "exits": dict(room.exits),
                    "hazards": sorted(room.hazards),
                }
                for room in state.cave
            }
        },
        "players": [
            {
                "name": player.name,
                "current_room_id": player.current_room,
                "arrows": player.arrows,
                "health": player.health,
                "inventory": list(player.inventory),
            }
            for player in state.players
        ],
        "wumpus_location": state.wumpus_location,
        # Derived from room hazards; written for readers, ignored on load.
        "pits": sorted(state.pits),
    }


def _fold(name: str) -> str:
    return name.replace("_", "").lower()


def _field(data: Any, name: str, default: Any = ...) -> Any:
    """Look up ``name`` in a JSON object regardless of case or underscores."""
    if not isinstance(data, dict):
        raise SaveError(f"Expected an object holding {name!r}")
    wanted = _fold(name)
    for key, value in data.items():
        if _fold(key) == wanted:
            return value
    if default is ...:
        raise SaveError(f"Missing field {name!r}")
    return default


def _string_list(data: Any, name: str) -> list[str]:
    values = _field(data, name, []) or []
    if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
        raise SaveError(f"Field {name!r} must be a list of strings")
    return list(values)


def _room_from_dict(data: Any) -> Room:
    exits = _field(data, "exits", {}) or {}
    if not isinstance(exits, dict):
        raise SaveError("Room exits must be an object")
    return Room(
        number=int(_field(data, "id")),
        description=str(_field(data, "description", "")),
        exits={str(direction).lower(): int(target) for direction, target in exits.items()},
        hazards=frozenset(_string_list(data, "hazards")),
    )


def _player_from_dict(data: Any) -> Player:
    return Player(
        name=str(_field(data, "name", "") or ""),
        current_room=int(_field(data, "current_room_id")),
        arrows=max(0, int(_field(data, "arrows", STARTING_ARROWS))),
        health=int(_field(data, "health", STARTING_HEALTH)),
        inventory=_string_list(data, "inventory"),
    )


def state_from_dict(data: Any) -> GameState:
    """Rebuild a game from data produced by state_to_dict."""
    try:
        rooms = _field(_field(data, "map"), "rooms")
        if not isinstance(rooms, dict):
            raise SaveError("Map rooms must be an object")
        cave = CaveMap(_room_from_dict(room) for room in rooms.values())
        players = _field(data, "players")
        if not isinstance(players, list):
            raise SaveError("Players must be a list")
        return GameState(
            cave=cave,
            players=[_player_from_dict(player) for player in players],
            wumpus_location=int(_field(data, "wumpus_location")),
        )
    except SaveError:
        raise
    except (MapError, TypeError, ValueError) as exc:
        raise SaveError(f"Corrupt save data: {exc}") from exc


def save_exists(path: Path = DEFAULT_SAVE_FILE) -> bool:
    return path.is_file()


def save_game(state: GameState, path: Path = DEFAULT_SAVE_FILE) -> None:
    """Write the whole game to ``path``, replacing any previous save."""
    path.write_text(json.dumps(state_to_dict(state), indent=2), encoding="utf-8")
    logger.info(
        "game_saved",
        path=str(path),
        room=state.player.current_room,
        arrows=state.player.arrows,
    )


def load_game(path: Path = DEFAULT_SAVE_FILE) -> GameState:
    """Read a game written by save_game."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SaveError(f"Save file {path} could not be read: {exc}") from exc

    state = state_from_dict(data)
    logger.info(
        "game_loaded",
        path=str(path),
        player=state.player.name,
        room=state.player.current_room,
    )
    return state
