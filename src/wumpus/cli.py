"""Console driver: the interactive game loop and the AI-assisted modes."""

import random
from collections.abc import Callable
from pathlib import Path

from .companion import (
    Companion,
    CompanionError,
    CompanionParseError,
    build_advice_prompt,
    build_command_prompt,
    build_hint_prompt,
    parse_ai_action,
)
from .engine.commands import (
    CommandKind,
    Outcome,
    TurnResult,
    get_exits,
    get_room_description,
    move,
    parse_command,
    shoot,
    warnings,
)
from .engine.state import GameState, new_game_state
from .logging import get_logger
from .persistence import DEFAULT_SAVE_FILE, SaveError, load_game, save_exists, save_game

logger = get_logger(__name__)

MAIN_PROMPT = "\nWhat do you do? (move/shoot/ask/play/save/quit): "
PLAY_PROMPT = "\nYour action (or 'stop' to end AI help): "

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


class GameSession:
    """Owns one game and runs it against a console."""

    def __init__(
        self,
        state: GameState,
        companion: Companion,
        *,
        save_file: Path = DEFAULT_SAVE_FILE,
        rng: random.Random | None = None,
        input_fn: InputFn = input,
        output_fn: OutputFn = print,
    ):
        self.state = state
        self.companion = companion
        self.save_file = save_file
        self.rng = rng or random.Random()
        self.input = input_fn
        self.output = output_fn

    def run(self) -> Outcome:
        """Play until the player quits, wins or loses."""
        while True:
            self._show_status()
            command = parse_command(self.input(MAIN_PROMPT))

            if command.kind is CommandKind.QUIT:
                return Outcome.PLAYING
            if command.kind is CommandKind.SAVE:
                self.save()
            elif command.kind is CommandKind.MOVE:
                direction = command.direction or self._ask_direction()
                outcome = self._report(move(self.state, direction, self.rng))
                if outcome.is_terminal:
                    return outcome
            elif command.kind is CommandKind.SHOOT:
                direction = command.direction or self._ask_direction()
                outcome = self._report(shoot(self.state, direction, self.rng))
                if outcome.is_terminal:
                    return outcome
            elif command.kind is CommandKind.ASK:
                self.ask()
            elif command.kind is CommandKind.PLAY:
                outcome = self.play()
                if outcome.is_terminal:
                    return outcome
            else:
                self.output("Invalid action")

    def save(self) -> None:
        save_game(self.state, self.save_file)
        self.output("Game saved!")

    def ask(self) -> None:
        """One-shot hint about the current room."""
        try:
            reply = self.companion.ask(build_hint_prompt(self.state.current_room))
        except CompanionError as exc:
            self.output(f"AI Error: {exc}")
            return
        self.output(f"AI Advice: {reply}")

    def play(self) -> Outcome:
        """Let the companion interpret free-text commands until 'stop'."""
        self.output("\nAI Companion joined your adventure!")
        while True:
            try:
                advice = self.companion.ask(build_advice_prompt(self.state))
                self.output(f"\nAI Companion says: {advice}")

                text = (self.input(PLAY_PROMPT) or "").strip().lower()
                if text == "stop":
                    return Outcome.PLAYING

                outcome = self._execute_ai_command(text)
                if outcome.is_terminal:
                    return outcome
            except CompanionError as exc:
                logger.warning("play_mode_ended", error=str(exc))
                self.output(f"AI Error: {exc}")
                return Outcome.PLAYING

    def _execute_ai_command(self, text: str) -> Outcome:
        reply = self.companion.ask(build_command_prompt(text, self.state))
        try:
            action = parse_ai_action(reply)
        except CompanionParseError as exc:
            logger.info("ai_action_rejected", error=str(exc))
            self.output("AI response was invalid. Try again.")
            return Outcome.PLAYING

        self.output(action.message)
        if action.direction is None:
            return Outcome.PLAYING
        if action.action == "move":
            return self._report(move(self.state, action.direction, self.rng))
        if action.action == "shoot":
            return self._report(shoot(self.state, action.direction, self.rng))
        return Outcome.PLAYING

    def _show_status(self) -> None:
        self.output(f"\n{get_room_description(self.state)}")
        for warning in warnings(self.state):
            self.output(warning)
        self.output(f"Exits: {', '.join(get_exits(self.state))}")
        self.output(f"Arrows: {self.state.player.arrows}")

    def _ask_direction(self) -> str:
        return (self.input("Direction: ") or "").strip().lower()

    def _report(self, result: TurnResult) -> Outcome:
        if result.messages:
            self.output(result.text)
        return result.outcome


def _confirm(message: str, input_fn: InputFn) -> bool:
    return (input_fn(message) or "").strip().lower() == "y"


def start(
    companion: Companion,
    *,
    save_file: Path = DEFAULT_SAVE_FILE,
    rng: random.Random | None = None,
    input_fn: InputFn = input,
    output_fn: OutputFn = print,
) -> GameSession:
    """Greet the player and set up a new or restored game."""
    output_fn("Welcome to Hunt the Wumpus!")
    name = (input_fn("Enter your name: ") or "").strip()

    state = None
    if save_exists(save_file) and _confirm("Load game? (y/n): ", input_fn):
        try:
            state = load_game(save_file)
        except SaveError as exc:
            logger.warning("save_load_failed", path=str(save_file), error=str(exc))
            output_fn(f"Could not load saved game: {exc}")
    if state is None:
        state = new_game_state(name)
        logger.info("new_game_started", player=name)

    return GameSession(
        state,
        companion,
        save_file=save_file,
        rng=rng,
        input_fn=input_fn,
        output_fn=output_fn,
    )
