"""
Briefcase Assembler

Constructs the project "briefcase": the system context Claude answers from,
rendered from an aggregated ProjectSnapshot.
"""

import logging
from decimal import Decimal
from typing import Optional, Union

from ..librarian.records import BidStatus, PackageSummary, ProjectSnapshot
from .templates import BriefcaseTemplates

logger = logging.getLogger(__name__)

# Keeps the context (and the cost of the model call) bounded
MAX_CONTEXT_BID_ITEMS = 50

NO_PACKAGES = "No scope packages defined."
NO_BID_ITEMS = "No bid items defined."
NO_BIDS = "no bids"


def format_money(amount: Optional[Union[Decimal, int, float]]) -> str:
    """
    Format a dollar amount with thousands separators.

    No rounding is applied beyond the stored precision.

    Args:
        amount: Amount to render

    Returns:
        Formatted string (e.g., '$12,500.00'), or 'N/A' when amount is None
    """
    if amount is None:
        return "N/A"
    return f"${amount:,}"


class BriefcaseAssembler:
    """
    Assembles the system context for project chat.
    Combines assistant instructions, the change grammar and project data.
    """

    def __init__(self, max_bid_items: int = MAX_CONTEXT_BID_ITEMS):
        """
        Initialize the briefcase assembler.

        Args:
            max_bid_items: Number of bid items rendered before truncating
        """
        self.max_bid_items = max_bid_items
        self.templates = BriefcaseTemplates()
        logger.info("BriefcaseAssembler initialized")

    def assemble_project_context(self, snapshot: ProjectSnapshot) -> str:
        """
        Assemble the system context for a project.

        Args:
            snapshot: Aggregated project data from BidAggregator.build()

        Returns:
            Formatted system prompt string for Claude
        """
        project = snapshot.project
        logger.info(f"Assembling briefcase for project: {project.name}")

        template_vars = {
            'project_name': project.name,
            'project_location': project.location or 'Not specified',
            'project_bid_date': project.bid_date.isoformat() if project.bid_date else 'Not set',
            'project_status': project.status,
            'change_types': self.templates.change_type_lines(),
            'summary': self.render_summary(snapshot),
            'packages': self.render_packages(snapshot),
            'bid_items': self.render_bid_items(snapshot),
        }

        prompt = self.templates.system_template().format(**template_vars)
        logger.info(f"Briefcase assembled ({len(prompt)} chars)")
        return prompt

    def render_summary(self, snapshot: ProjectSnapshot) -> str:
        """Render item count, submitted-bid count and the sum of lowest bids."""
        submitted_count = sum(1 for bid in snapshot.bids if bid.status == BidStatus.SUBMITTED.value)
        lowest_total = sum(
            (bid.amount for bid in snapshot.lowest_bids.values() if bid is not None),
            Decimal("0"),
        )
        return self.templates.summary_template().format(
            item_count=len(snapshot.bid_items),
            submitted_count=submitted_count,
            lowest_total=format_money(lowest_total),
        )

    def render_packages(self, snapshot: ProjectSnapshot) -> str:
        """Render every scope package with its ranked bidders."""
        if not snapshot.packages:
            return NO_PACKAGES

        blocks = []
        for package in snapshot.packages:
            summary = snapshot.package_summaries.get(package.id) or PackageSummary(package=package)
            blocks.append(self._render_package(summary))
        return "\n".join(blocks)

    def _render_package(self, summary: PackageSummary) -> str:
        lowest = summary.lowest_bidder
        if lowest:
            lowest_text = f"{lowest.company_name} at {format_money(lowest.total)}"
        else:
            lowest_text = NO_BIDS

        if summary.bidders:
            bidders = "\n".join(
                f"    {rank}. {bidder.company_name}: {format_money(bidder.total)} "
                f"({bidder.item_count} items)"
                for rank, bidder in enumerate(summary.bidders, start=1)
            )
        else:
            bidders = "    (none)"

        return self.templates.package_template().format(
            name=summary.package.name,
            id=summary.package.id,
            item_count=len(summary.package.bid_item_ids),
            lowest=lowest_text,
            bidders=bidders,
        )

    def render_bid_items(self, snapshot: ProjectSnapshot) -> str:
        """Render the first max_bid_items bid items in fetch order."""
        if not snapshot.bid_items:
            return NO_BID_ITEMS

        shown = snapshot.bid_items[:self.max_bid_items]
        lines = []
        for item in shown:
            lowest = snapshot.lowest_bids.get(item.id)
            if lowest:
                lowest_text = f"lowest {format_money(lowest.amount)} from {lowest.company_name}"
            else:
                lowest_text = NO_BIDS
            lines.append(self.templates.bid_item_template().format(
                item_number=item.item_number or '-',
                description=item.description,
                trade=f" ({item.trade.name})" if item.trade else "",
                id=item.id,
                lowest=lowest_text,
                bid_count=len(snapshot.bids_by_item.get(item.id, [])),
            ))

        hidden = len(snapshot.bid_items) - len(shown)
        if hidden > 0:
            logger.debug(f"Bid item list truncated: {hidden} items omitted")
            lines.append(f"(Showing the first {len(shown)} of {len(snapshot.bid_items)} bid items.)")

        return "\n".join(lines)
