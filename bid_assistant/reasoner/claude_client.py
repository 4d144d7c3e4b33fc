"""
Claude API Client

Handles communication with Anthropic's Claude API for project chat.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from anthropic import Anthropic, AnthropicError
from anthropic.types import Message
from pydantic import BaseModel, Field

from ..errors import GenerationError

logger = logging.getLogger(__name__)


class ConversationTurn(BaseModel):
    """A prior message in the conversation."""
    role: str = Field(..., pattern="^(user|assistant)$", description="Message author")
    content: str = Field(..., description="Message text")


class ClaudeClient:
    """
    Client for answering project questions with Claude.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 2048,
        client: Optional[Anthropic] = None
    ):
        """
        Initialize Claude API client.

        Args:
            api_key: Anthropic API key
            model: Claude model identifier
            max_tokens: Maximum tokens for responses
            client: Pre-built Anthropic client to use instead of creating one
        """
        # Failures surface to the caller unretried
        self.client = client or Anthropic(api_key=api_key, max_retries=0)
        self.model = model
        self.max_tokens = max_tokens
        logger.info(f"ClaudeClient initialized with model: {model}")

    def build_messages(
        self,
        conversation_history: Sequence[ConversationTurn],
        message: str
    ) -> List[Dict[str, Any]]:
        """
        Build the message list: prior turns in order, then the new user message.

        Args:
            conversation_history: Prior turns, oldest first
            message: New user message

        Returns:
            Messages for the Claude API
        """
        messages = [{"role": turn.role, "content": turn.content} for turn in conversation_history]
        messages.append({"role": "user", "content": message})
        return messages

    def chat(
        self,
        system_prompt: str,
        conversation_history: Sequence[ConversationTurn],
        message: str
    ) -> str:
        """
        Send the conversation to Claude and return its reply.

        Args:
            system_prompt: Project context from BriefcaseAssembler
            conversation_history: Prior turns, oldest first
            message: New user message

        Returns:
            Reply text verbatim ("" if Claude returned no text)

        Raises:
            GenerationError: If the API call fails
        """
        messages = self.build_messages(conversation_history, message)
        logger.info(f"Sending {len(messages)} message(s) to Claude")

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=system_prompt,
                messages=messages
            )
        except AnthropicError as e:
            logger.error(f"Failed to get reply from Claude: {e}")
            raise GenerationError(f"Claude API call failed: {e}")

        logger.debug(f"Claude response received: {response.stop_reason}")
        reply = self._extract_text(response)
        logger.info(f"Reply received ({len(reply)} chars)")
        return reply

    def _extract_text(self, message: Message) -> str:
        """
        Join the text blocks of Claude's response.

        Args:
            message: Claude API message response

        Returns:
            Reply text, or "" if the response has no text content
        """
        parts = [
            block.text for block in (message.content or [])
            if getattr(block, 'type', None) == 'text'
        ]
        if not parts:
            logger.warning("No text content in Claude's response")
        return "".join(parts)

    def validate_api_key(self) -> bool:
        """
        Validate that the API key is working.

        Returns:
            True if API key is valid, False otherwise
        """
        try:
            self.client.messages.create(
                model=self.model,
                max_tokens=10,
                messages=[
                    {
                        "role": "user",
                        "content": "Test"
                    }
                ]
            )
            logger.info("API key validation successful")
            return True
        except AnthropicError as e:
            logger.error(f"API key validation failed: {e}")
            return False
