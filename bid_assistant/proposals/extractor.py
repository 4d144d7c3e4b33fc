"""
Change Proposal Extractor

Pulls ``<proposed_change>`` blocks out of Claude's reply and parses each into
a ChangeProposal. A malformed block is skipped without affecting the others.
"""

import json
import logging
import re
from typing import Iterator, List, Optional

from pydantic import ValidationError

from .models import ChangeProposal

logger = logging.getLogger(__name__)

PROPOSED_CHANGE_PATTERN = re.compile(r"<proposed_change>(.*?)</proposed_change>", re.DOTALL)


def iter_proposed_changes(reply: str) -> Iterator[ChangeProposal]:
    """
    Lazily yield the parseable change proposals in a reply, in order.

    Args:
        reply: Raw reply text from Claude

    Yields:
        ChangeProposal for every well-formed block
    """
    for index, match in enumerate(PROPOSED_CHANGE_PATTERN.finditer(reply or "")):
        proposal = parse_proposal_block(match.group(1), index)
        if proposal is not None:
            yield proposal


def parse_proposal_block(body: str, index: int = 0) -> Optional[ChangeProposal]:
    """
    Parse the body of one ``<proposed_change>`` block.

    Args:
        body: Text between the delimiters
        index: Position of the block in the reply, for logging

    Returns:
        ChangeProposal, or None if the body is not a valid proposal
    """
    try:
        payload = json.loads(body.strip())
    except json.JSONDecodeError as e:
        logger.warning(f"Skipping proposed change #{index + 1}: invalid JSON ({e})")
        return None

    if not isinstance(payload, dict):
        logger.warning(f"Skipping proposed change #{index + 1}: body is not an object")
        return None

    try:
        return ChangeProposal.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Skipping proposed change #{index + 1}: "
                       f"{e.error_count()} validation error(s)")
        logger.debug(f"Rejected proposal body: {body.strip()[:200]}")
        return None


def extract_proposed_changes(reply: str) -> List[ChangeProposal]:
    """
    Parse every well-formed change proposal in a reply.

    Args:
        reply: Raw reply text from Claude

    Returns:
        Proposals in order of appearance (possibly empty)
    """
    proposals = list(iter_proposed_changes(reply))
    if proposals:
        logger.info(f"Extracted {len(proposals)} proposed change(s)")
    return proposals


class ProposalExtractor:
    """
    Injectable wrapper around extract_proposed_changes.
    """

    def extract(self, reply: str) -> List[ChangeProposal]:
        return extract_proposed_changes(reply)
