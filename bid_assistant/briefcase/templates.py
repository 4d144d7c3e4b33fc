"""
Briefcase Templates

Prompt templates for the project assistant's system context.
"""

from typing import Dict

from ..proposals.models import ChangeType


class BriefcaseTemplates:
    """
    Template strings for the project chat system prompt.
    """

    DETAIL_KEYS: Dict[ChangeType, str] = {
        ChangeType.UPDATE_BID: '{{"bid_id": "...", "amount": 0}}',
        ChangeType.SELECT_BID: '{{"bid_item_id": "...", "bid_id": "..."}}',
        ChangeType.ADD_MARKUP: '{{"percent": 0, "bid_item_ids": ["..."]}}',
        ChangeType.UPDATE_ESTIMATE: '{{"bid_item_id": "...", "estimated_cost": 0}}',
        ChangeType.CREATE_PACKAGE: '{{"name": "...", "description": "...", "bid_item_ids": ["..."]}}',
        ChangeType.ASSIGN_ITEMS: '{{"package_id": "...", "bid_item_ids": ["..."]}}',
    }

    DETAIL_HELP: Dict[ChangeType, str] = {
        ChangeType.UPDATE_BID: "change the amount of an existing bid",
        ChangeType.SELECT_BID: "select a bid as the carried price for a bid item",
        ChangeType.ADD_MARKUP: "apply a percentage markup to bid items",
        ChangeType.UPDATE_ESTIMATE: "change the estimated cost of a bid item",
        ChangeType.CREATE_PACKAGE: "create a new scope package from bid items",
        ChangeType.ASSIGN_ITEMS: "add bid items to an existing scope package",
    }

    @staticmethod
    def system_template() -> str:
        """
        Template for the project chat system prompt.

        Returns:
            Prompt template string with {project_*}, {change_types},
            {summary}, {packages} and {bid_items} placeholders
        """
        return """You are an AI assistant for a construction general contractor's bid coordination team. You are helping with the project "{project_name}".

# YOUR CAPABILITIES
1. Answer questions about bids, pricing, subcontractors, and scope packages
2. Compare subcontractors across bid items and packages
3. Propose changes to the estimate. You never apply changes yourself; every change is reviewed and approved by the user first.

# PROPOSING CHANGES
When the user asks you to change something, explain the change in plain language, then include one block per change in exactly this format:

<proposed_change>
{{"type": "update_bid", "description": "Short summary of the change", "target": "What is being changed", "current_value": "Value today", "new_value": "Value after the change", "details": {{}}}}
</proposed_change>

The body must be a single valid JSON object. Allowed values for "type", with the keys expected in "details":
{change_types}

Only propose changes when the user asks for them. Use the identifiers shown in the project data below.

# PROJECT
Name: {project_name}
Location: {project_location}
Bid Date: {project_bid_date}
Status: {project_status}

# SUMMARY
{summary}

# SCOPE PACKAGES
{packages}

# BID ITEMS
{bid_items}

Be concise and specific. Quote dollar amounts and company names from the data above. If the data does not contain the answer, say so."""

    @staticmethod
    def summary_template() -> str:
        """Template for the numeric project summary."""
        return """Total bid items: {item_count}
Submitted bids: {submitted_count}
Sum of lowest bids: {lowest_total}"""

    @staticmethod
    def package_template() -> str:
        """Template for one scope package."""
        return """- {name} [id: {id}] ({item_count} items)
  Lowest bidder: {lowest}
  Bidders:
{bidders}"""

    @staticmethod
    def bid_item_template() -> str:
        """Template for one bid item line."""
        return "- {item_number} {description}{trade} [id: {id}]: {lowest} ({bid_count} bids received)"

    @classmethod
    def change_type_lines(cls) -> str:
        """
        Render the allowed change types and their detail payloads.

        Returns:
            One line per change type
        """
        return "\n".join(
            f"- {change_type.value}: {cls.DETAIL_HELP[change_type]}. "
            f"details: {cls.DETAIL_KEYS[change_type].format()}"
            for change_type in ChangeType
        )
