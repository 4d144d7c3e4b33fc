"""
Bid Aggregator

Derives per-item and per-package aggregates from a project's fetched rows.
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional

from .records import (
    BidItemRecord,
    BidRecord,
    PackageBidder,
    PackageSummary,
    ProjectData,
    ProjectRecord,
    ProjectSnapshot,
    ScopePackageRecord,
)
from .state_queries import ProjectQueries

logger = logging.getLogger(__name__)


def find_lowest_bid(bids: List[BidRecord]) -> Optional[BidRecord]:
    """
    Find the lowest submitted bid that carries an amount.

    Ties keep the first bid encountered.

    Args:
        bids: Bids on a single bid item

    Returns:
        The lowest qualifying bid, or None if no bid qualifies
    """
    lowest: Optional[BidRecord] = None
    for bid in bids:
        if not bid.qualifies:
            continue
        if lowest is None or bid.amount < lowest.amount:
            lowest = bid
    return lowest


def rank_package_bidders(
    package: ScopePackageRecord,
    bids: List[BidRecord]
) -> PackageSummary:
    """
    Total each subcontractor's qualifying bids on a package's items and rank them.

    Bids on items outside the package, bids that are not submitted or have no
    amount, and bids without a subcontractor do not count.

    Args:
        package: Scope package to summarize
        bids: All bids of the project

    Returns:
        PackageSummary with bidders ranked by ascending total
    """
    members = set(package.bid_item_ids)
    totals: Dict[str, Decimal] = {}
    counts: Dict[str, int] = {}
    names: Dict[str, str] = {}

    for bid in bids:
        if bid.bid_item_id not in members or not bid.qualifies or bid.subcontractor is None:
            continue
        sub_id = bid.subcontractor.id
        if sub_id not in totals:
            totals[sub_id] = Decimal("0")
            counts[sub_id] = 0
            names[sub_id] = bid.subcontractor.company_name
        totals[sub_id] += bid.amount
        counts[sub_id] += 1

    # sorted() is stable, so equal totals stay in encounter order
    bidders = sorted(
        (
            PackageBidder(
                subcontractor_id=sub_id,
                company_name=names[sub_id],
                total=totals[sub_id],
                item_count=counts[sub_id],
            )
            for sub_id in totals
        ),
        key=lambda bidder: bidder.total,
    )

    return PackageSummary(
        package=package,
        bidders=bidders,
        lowest_bidder=bidders[0] if bidders else None,
    )


def aggregate_snapshot(
    project: ProjectRecord,
    bid_items: List[BidItemRecord],
    bids: List[BidRecord],
    packages: List[ScopePackageRecord]
) -> ProjectSnapshot:
    """
    Build the project snapshot from fetched rows.

    Args:
        project: Project record
        bid_items: Bid items in fetch order
        bids: Bids on those items
        packages: Scope packages of the project

    Returns:
        Frozen ProjectSnapshot
    """
    bids_by_item: Dict[str, List[BidRecord]] = {item.id: [] for item in bid_items}
    for bid in bids:
        if bid.bid_item_id in bids_by_item:
            bids_by_item[bid.bid_item_id].append(bid)

    lowest_bids = {item_id: find_lowest_bid(item_bids) for item_id, item_bids in bids_by_item.items()}
    package_summaries = {package.id: rank_package_bidders(package, bids) for package in packages}

    return ProjectSnapshot(
        project=project,
        bid_items=bid_items,
        bids=bids,
        bids_by_item=bids_by_item,
        lowest_bids=lowest_bids,
        packages=packages,
        package_summaries=package_summaries,
    )


class BidAggregator:
    """
    Fetches a project's rows and turns them into a ProjectSnapshot.
    """

    def __init__(self, queries: ProjectQueries):
        """
        Args:
            queries: ProjectQueries used for the reads
        """
        self.queries = queries
        logger.info("BidAggregator initialized")

    def build(self, project_id: str) -> ProjectSnapshot:
        """
        Fetch and aggregate one project.

        Raises:
            ProjectNotFoundError: If the project does not exist
            DataUnavailableError: If any read fails
        """
        data: ProjectData = self.queries.load_project_data(project_id)
        snapshot = aggregate_snapshot(data.project, data.bid_items, data.bids, data.packages)

        priced = sum(1 for bid in snapshot.lowest_bids.values() if bid is not None)
        logger.info(f"Snapshot built for {data.project.name}: {priced}/{len(data.bid_items)} "
                    f"items priced, {len(snapshot.package_summaries)} packages ranked")
        return snapshot
