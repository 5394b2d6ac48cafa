"""Tests for the AI companion client, prompts and reply parsing."""

import json

import httpx
import pytest

from wumpus.companion import (
    CompanionAuthError,
    CompanionNetworkError,
    CompanionParseError,
    OpenAICompanion,
    build_advice_prompt,
    build_command_prompt,
    build_hint_prompt,
    parse_ai_action,
)
from wumpus.config import Config, MissingCredentialError
from wumpus.engine.state import GameState


def _companion(handler) -> OpenAICompanion:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return OpenAICompanion("sk-test", api_url="https://ai.test/v1/chat", client=client)


def _completion(text: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


def test_ask_posts_chat_completion():
    """The request carries the credential and a one-message conversation."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_completion("  Go east!  "))

    reply = _companion(handler).ask("hello")

    assert reply == "Go east!"
    assert seen["url"] == "https://ai.test/v1/chat"
    assert seen["auth"] == "Bearer sk-test"
    assert seen["body"] == {
        "model": "gpt-3.5-turbo",
        "messages": [{"role": "user", "content": "hello"}],
        "max_tokens": 150,
        "temperature": 0.7,
    }


def test_ask_auth_error():
    companion = _companion(lambda request: httpx.Response(401, json={"error": "no"}))
    with pytest.raises(CompanionAuthError):
        companion.ask("hello")


def test_ask_server_error():
    companion = _companion(lambda request: httpx.Response(500, text="boom"))
    with pytest.raises(CompanionNetworkError, match="500"):
        companion.ask("hello")


def test_ask_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(CompanionNetworkError, match="refused"):
        _companion(handler).ask("hello")


def test_ask_unexpected_schema():
    companion = _companion(lambda request: httpx.Response(200, json={"choices": []}))
    with pytest.raises(CompanionParseError):
        companion.ask("hello")


def test_ask_non_json_body():
    companion = _companion(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(CompanionParseError):
        companion.ask("hello")


def test_from_config_requires_credential():
    with pytest.raises(MissingCredentialError, match="OPENAI_KEY"):
        OpenAICompanion.from_config(Config(api_key=""))


def test_from_config():
    config = Config(api_key="sk-x", model="gpt-4o-mini", max_tokens=50, temperature=0.1)
    companion = OpenAICompanion.from_config(config)
    try:
        assert companion.api_key == "sk-x"
        assert companion.model == "gpt-4o-mini"
        assert companion.max_tokens == 50
        assert companion.temperature == 0.1
    finally:
        companion.close()


def test_hint_prompt(state: GameState):
    prompt = build_hint_prompt(state.current_room)
    assert "You're in a dark cave" in prompt
    assert "Possible exits: north, east" in prompt


def test_advice_prompt(state: GameState):
    prompt = build_advice_prompt(state)
    assert "Hunt the Wumpus" in prompt
    assert "Wumpus location: 2" in prompt
    assert "Player health: 100, arrows: 3" in prompt
    assert "Exits: north, east" in prompt


def test_command_prompt_embeds_state(state: GameState):
    prompt = build_command_prompt("go to the tunnel", state)
    assert "'go to the tunnel'" in prompt
    assert "Current room ID: 1" in prompt
    assert '"wumpus_location": 2' in prompt
    assert '"action"' in prompt


def test_parse_ai_action():
    action = parse_ai_action('{"action": "move", "direction": "East", "message": "Off we go"}')
    assert action.action == "move"
    assert action.direction == "east"
    assert action.message == "Off we go"


def test_parse_ai_action_case_insensitive_keys():
    action = parse_ai_action('{"Action": "SHOOT", "Direction": "north", "Message": "Fire!"}')
    assert action.action == "shoot"
    assert action.direction == "north"


def test_parse_ai_action_code_fence():
    reply = '```json\n{"action": "invalid", "message": "Huh?"}\n```'
    action = parse_ai_action(reply)
    assert action.action == "invalid"
    assert action.direction is None


@pytest.mark.parametrize(
    "reply",
    [
        "Go north, brave hunter!",
        "[1, 2]",
        '{"action": "dance", "message": "x"}',
        '{"direction": "north"}',
    ],
)
def test_parse_ai_action_rejects(reply):
    with pytest.raises(CompanionParseError):
        parse_ai_action(reply)
