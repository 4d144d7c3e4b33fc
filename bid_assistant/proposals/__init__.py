"""
Proposals Module

Parses the change proposals embedded in Claude's replies.
Proposals are never applied here; approval and application happen downstream.
"""

from .extractor import ProposalExtractor, extract_proposed_changes
from .models import ChangeProposal, ChangeType

__all__ = ["ChangeProposal", "ChangeType", "ProposalExtractor", "extract_proposed_changes"]
