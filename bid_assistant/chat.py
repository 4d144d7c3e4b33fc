"""
Project Chat Service

Drives one chat request end-to-end:
1. Validate the request
2. Aggregate project bid data
3. Assemble the briefcase
4. Get Claude's reply
5. Extract proposed changes
"""

import logging
from typing import List, Optional

from pydantic import BaseModel, Field

from .briefcase.assembler import BriefcaseAssembler
from .config import Settings
from .errors import ClientInputError
from .librarian.aggregator import BidAggregator
from .librarian.db_client import DatabaseClient
from .librarian.state_queries import ProjectQueries
from .proposals.extractor import ProposalExtractor
from .proposals.models import ChangeProposal
from .reasoner.claude_client import ClaudeClient, ConversationTurn

logger = logging.getLogger(__name__)


class ChatRequest(BaseModel):
    """Incoming chat payload."""
    project_id: Optional[str] = Field(None, description="Project identifier")
    message: Optional[str] = Field(None, description="New user message")
    conversation_history: Optional[List[ConversationTurn]] = Field(
        None, description="Prior turns, oldest first"
    )


class ChatResponse(BaseModel):
    """Reply text plus any change proposals found in it."""
    response: str
    proposed_changes: List[ChangeProposal] = Field(default_factory=list)
    has_changes: bool = False


def validate_request(request: ChatRequest) -> None:
    """
    Check the required fields of a chat request.

    Raises:
        ClientInputError: If project_id or message is missing or blank
    """
    missing = [
        name for name in ('project_id', 'message')
        if not (getattr(request, name) or '').strip()
    ]
    if missing:
        raise ClientInputError(f"Missing required field(s): {', '.join(missing)}")


class ProjectChatService:
    """
    Answers questions about a project and collects proposed changes.
    """

    def __init__(
        self,
        aggregator: BidAggregator,
        assembler: BriefcaseAssembler,
        claude: ClaudeClient,
        extractor: Optional[ProposalExtractor] = None
    ):
        """
        Args:
            aggregator: Builds the project snapshot
            assembler: Renders the snapshot into Claude's system context
            claude: Claude API client
            extractor: Parses proposals from the reply
        """
        self.aggregator = aggregator
        self.assembler = assembler
        self.claude = claude
        self.extractor = extractor or ProposalExtractor()
        logger.info("ProjectChatService initialized")

    def handle(self, request: ChatRequest) -> ChatResponse:
        """
        Handle one chat request.

        Args:
            request: Chat payload

        Returns:
            ChatResponse with the reply and parsed change proposals

        Raises:
            ClientInputError: If required fields are missing (nothing is fetched)
            ProjectNotFoundError: If the project does not exist
            DataUnavailableError: If the project data cannot be read
            GenerationError: If Claude fails
        """
        validate_request(request)
        logger.info(f"Handling chat request for project: {request.project_id}")

        snapshot = self.aggregator.build(request.project_id)
        system_prompt = self.assembler.assemble_project_context(snapshot)

        reply = self.claude.chat(
            system_prompt,
            request.conversation_history or [],
            request.message
        )

        proposals = self.extractor.extract(reply)
        logger.info(f"Chat request complete: {len(proposals)} proposed change(s)")

        return ChatResponse(
            response=reply,
            proposed_changes=proposals,
            has_changes=len(proposals) > 0
        )


def build_service(settings: Settings, db_client: Optional[DatabaseClient] = None) -> ProjectChatService:
    """
    Wire up a ProjectChatService from configuration.

    Args:
        settings: Loaded settings
        db_client: Existing database client to reuse

    Returns:
        Ready-to-use ProjectChatService
    """
    db_client = db_client or DatabaseClient(settings.database_url, echo=settings.db_echo)
    return ProjectChatService(
        aggregator=BidAggregator(ProjectQueries(db_client)),
        assembler=BriefcaseAssembler(max_bid_items=settings.max_context_items),
        claude=ClaudeClient(
            api_key=settings.anthropic_api_key,
            model=settings.anthropic_model,
            max_tokens=settings.max_tokens
        ),
    )
