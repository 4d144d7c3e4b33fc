"""
Reasoner Module

Integrates with Claude API for answering questions about a project.
Handles conversation assembly and reply extraction.
"""

from .claude_client import ClaudeClient, ConversationTurn

__all__ = ["ClaudeClient", "ConversationTurn"]
