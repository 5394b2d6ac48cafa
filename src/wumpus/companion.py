"""The AI companion: an optional language model that gives hints.

The game only depends on the Companion protocol (prompt in, reply out).
OpenAICompanion is the real implementation; tests substitute a fake.
"""

import json
from typing import Any, Literal, Protocol

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .config import Config
from .engine.commands import get_exits, get_room_description
from .engine.state import GameState
from .engine.world import Room
from .logging import get_logger
from .persistence import state_to_dict

logger = get_logger(__name__)


class CompanionError(RuntimeError):
    """Base class for everything that can go wrong talking to the companion."""


class CompanionNetworkError(CompanionError):
    """The companion service could not be reached or answered with an error."""


class CompanionAuthError(CompanionError):
    """The companion service rejected the credential."""


class CompanionParseError(CompanionError):
    """The companion replied with something we could not understand."""


class Companion(Protocol):
    def ask(self, prompt: str) -> str:
        """Send a prompt and return the reply text."""
        ...


class OpenAICompanion:
    """Chat-completion client speaking the OpenAI HTTP API."""

    def __init__(
        self,
        api_key: str,
        *,
        api_url: str = Config.api_url,
        model: str = Config.model,
        max_tokens: int = Config.max_tokens,
        temperature: float = Config.temperature,
        timeout: float | None = Config.ai_timeout,
        client: httpx.Client | None = None,
    ) -> None:
        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout))

    @classmethod
    def from_config(cls, config: Config) -> "OpenAICompanion":
        return cls(
            config.require_api_key(),
            api_url=config.api_url,
            model=config.model,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            timeout=config.ai_timeout,
        )

    def ask(self, prompt: str) -> str:
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        logger.debug("companion_request", model=self.model, prompt_chars=len(prompt))

        try:
            response = self._client.post(self.api_url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("companion_error", kind="network", error=str(exc))
            raise CompanionNetworkError(f"Failed contacting companion: {exc}") from exc

        if response.status_code in (401, 403):
            logger.warning("companion_error", kind="auth", status=response.status_code)
            raise CompanionAuthError(
                f"Companion rejected the credential ({response.status_code})"
            )
        if response.is_error:
            logger.warning("companion_error", kind="http", status=response.status_code)
            raise CompanionNetworkError(
                f"Companion returned {response.status_code}: {response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise CompanionParseError("Companion reply was not JSON") from exc
        return _extract_text(data)

    def close(self) -> None:
        self._client.close()


def _extract_text(data: Any) -> str:
    """Pull ``choices[0].message.content`` out of a chat-completion body."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise CompanionParseError("Unexpected response schema from companion") from exc
    if not isinstance(content, str):
        raise CompanionParseError("Companion reply had no text content")
    return content.strip()


# Prompts ------------------------------------------------------------------


def build_hint_prompt(room: Room) -> str:
    exits = ", ".join(room.exits)
    return (
        f"In a text game, player is in: {room.description}. "
        f"Possible exits: {exits}. What should they do?"
    )


def build_advice_prompt(state: GameState) -> str:
    player = state.player
    return (
        "You are playing 'Hunt the Wumpus' with a human player.\n"
        f"Current room: {get_room_description(state)}\n"
        f"Exits: {', '.join(get_exits(state))}\n"
        f"Wumpus location: {state.wumpus_location}\n"
        f"Player health: {player.health}, arrows: {player.arrows}\n"
        "\n"
        "The player can: move [direction], shoot [direction], or ask for help.\n"
        "Provide a short, fun response suggesting what to do next:"
    )


def build_command_prompt(command: str, state: GameState) -> str:
    return (
        f"In Hunt the Wumpus, execute this command: '{command}'\n"
        f"Current room ID: {state.player.current_room}\n"
        f"Game state: {json.dumps(state_to_dict(state))}\n"
        "\n"
        "Respond ONLY with JSON containing:\n"
        "{\n"
        '    "action": "move", "shoot", or "invalid",\n'
        '    "direction": "north", "south", etc (if applicable),\n'
        '    "message": "Result description to show player"\n'
        "}"
    )


# Structured replies -------------------------------------------------------


class AIAction(BaseModel):
    """A command the companion chose in play mode."""

    model_config = ConfigDict(extra="ignore")

    action: Literal["move", "shoot", "invalid"]
    direction: str | None = None
    message: str = ""

    @field_validator("action", mode="before")
    @classmethod
    def _lower_action(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("direction", mode="before")
    @classmethod
    def _lower_direction(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() or None
        return value


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def parse_ai_action(reply: str) -> AIAction:
    """Parse the companion's JSON reply into an AIAction."""
    try:
        data = json.loads(_strip_code_fence(reply))
    except json.JSONDecodeError as exc:
        raise CompanionParseError(f"Companion reply was not JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise CompanionParseError("Companion reply was not a JSON object")

    try:
        return AIAction.model_validate({str(k).lower(): v for k, v in data.items()})
    except ValidationError as exc:
        raise CompanionParseError(f"Companion reply was malformed: {exc}") from exc
