"""Shared test fixtures for Hunt the Wumpus."""

import random

import pytest

from wumpus.engine.state import GameState, new_game_state
from wumpus.engine.world import CaveMap, default_cave


class FakeCompanion:
    """Companion that replays canned replies and records prompts."""

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.prompts: list[str] = []

    def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class ScriptedConsole:
    """Feeds scripted lines to input() and collects printed output."""

    def __init__(self, lines):
        self.lines = list(lines)
        self.prompts: list[str] = []
        self.printed: list[str] = []

    def input(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.lines.pop(0)

    def print(self, text: str) -> None:
        self.printed.append(text)

    @property
    def text(self) -> str:
        return "\n".join(self.printed)


@pytest.fixture
def cave() -> CaveMap:
    return default_cave()


@pytest.fixture
def state(cave: CaveMap) -> GameState:
    return new_game_state("Tester", cave)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def companion() -> FakeCompanion:
    return FakeCompanion()
