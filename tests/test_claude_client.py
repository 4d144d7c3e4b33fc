"""
Tests for the Claude client (the Anthropic SDK is mocked).
"""

import os
from types import SimpleNamespace
from unittest.mock import Mock

import httpx
import pytest
from anthropic import APIConnectionError

from bid_assistant.errors import GenerationError
from bid_assistant.reasoner.claude_client import ClaudeClient, ConversationTurn


def fake_message(*texts, stop_reason="end_turn"):
    return SimpleNamespace(
        content=[SimpleNamespace(type="text", text=t) for t in texts],
        stop_reason=stop_reason,
    )


@pytest.fixture
def sdk():
    sdk = Mock()
    sdk.messages.create.return_value = fake_message("Volt Partners is lowest at $219,750.")
    return sdk


def test_chat_sends_history_then_message(sdk):
    """Prior turns keep their order; the new message is last; context goes in system."""
    client = ClaudeClient(api_key="test", model="claude-test", max_tokens=512, client=sdk)
    history = [
        ConversationTurn(role="assistant", content="Hi! Ask me about this project."),
        ConversationTurn(role="user", content="How many bid items?"),
        ConversationTurn(role="assistant", content="There are 4."),
    ]

    reply = client.chat("PROJECT CONTEXT", history, "Who is lowest on electrical?")

    assert reply == "Volt Partners is lowest at $219,750."
    kwargs = sdk.messages.create.call_args.kwargs
    assert kwargs["model"] == "claude-test"
    assert kwargs["max_tokens"] == 512
    assert kwargs["system"] == "PROJECT CONTEXT"
    assert kwargs["messages"] == [
        {"role": "assistant", "content": "Hi! Ask me about this project."},
        {"role": "user", "content": "How many bid items?"},
        {"role": "assistant", "content": "There are 4."},
        {"role": "user", "content": "Who is lowest on electrical?"},
    ]
    sdk.messages.create.assert_called_once()


def test_reply_joins_text_blocks_and_skips_others(sdk):
    message = fake_message("Part one. ", "Part two.")
    message.content.insert(1, SimpleNamespace(type="thinking", thinking="..."))
    sdk.messages.create.return_value = message

    reply = ClaudeClient(api_key="test", client=sdk).chat("ctx", [], "hello")

    assert reply == "Part one. Part two."


def test_empty_reply(sdk):
    sdk.messages.create.return_value = SimpleNamespace(content=[], stop_reason="end_turn")

    assert ClaudeClient(api_key="test", client=sdk).chat("ctx", [], "hello") == ""


def test_api_error_is_not_retried(sdk):
    """SDK failures surface as GenerationError after a single attempt."""
    sdk.messages.create.side_effect = APIConnectionError(
        request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    )

    with pytest.raises(GenerationError) as excinfo:
        ClaudeClient(api_key="test", client=sdk).chat("ctx", [], "hello")

    assert "Claude API call failed" in excinfo.value.message
    assert excinfo.value.status_code == 500
    assert sdk.messages.create.call_count == 1


def test_default_sdk_client_disables_retries():
    client = ClaudeClient(api_key="sk-test")

    assert client.client.max_retries == 0


def test_conversation_turn_roles():
    ConversationTurn(role="user", content="hi")
    ConversationTurn(role="assistant", content="hello")
    with pytest.raises(ValueError):
        ConversationTurn(role="system", content="nope")


def test_validate_api_key(sdk):
    client = ClaudeClient(api_key="test", client=sdk)
    assert client.validate_api_key()

    sdk.messages.create.side_effect = APIConnectionError(
        request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    )
    assert not client.validate_api_key()


@pytest.mark.skipif(
    not os.getenv('ANTHROPIC_API_KEY'),
    reason="Anthropic API key not configured"
)
def test_live_api_key():
    """Validate a real API key (requires ANTHROPIC_API_KEY)."""
    client = ClaudeClient(api_key=os.getenv('ANTHROPIC_API_KEY'))

    assert client.validate_api_key(), "Claude API key validation failed"
