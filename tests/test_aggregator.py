"""
Tests for bid aggregation: lowest bids per item and package rankings.
"""

from decimal import Decimal
from unittest.mock import Mock

import pytest
from pydantic import ValidationError

from bid_assistant.librarian.aggregator import (
    BidAggregator,
    aggregate_snapshot,
    find_lowest_bid,
    rank_package_bidders,
)
from bid_assistant.librarian.records import ProjectData, ScopePackageRecord

from conftest import make_bid, make_item, make_sub


class TestFindLowestBid:
    """Lowest qualifying bid per item."""

    def test_lowest_amount_wins(self):
        acme, volt = make_sub("acme"), make_sub("volt")
        bids = [make_bid("b1", "i1", 1200, acme), make_bid("b2", "i1", 950, volt)]

        assert find_lowest_bid(bids).id == "b2"

    def test_tie_keeps_first_encountered(self):
        bids = [
            make_bid("b1", "i1", 800, make_sub("acme")),
            make_bid("b2", "i1", 800, make_sub("volt")),
            make_bid("b3", "i1", 900, make_sub("zeta")),
        ]

        assert find_lowest_bid(bids).id == "b1"

    def test_ignores_unsubmitted_and_unpriced_bids(self):
        bids = [
            make_bid("b1", "i1", 100, status="invited"),
            make_bid("b2", "i1", 50, status="withdrawn"),
            make_bid("b3", "i1", None),
            make_bid("b4", "i1", 400),
        ]

        assert find_lowest_bid(bids).id == "b4"

    def test_no_qualifying_bid(self):
        assert find_lowest_bid([]) is None
        assert find_lowest_bid([make_bid("b1", "i1", 100, status="invited")]) is None

    def test_lowest_is_not_above_any_submitted_amount(self, bid_scenario):
        _, items, bids, _ = bid_scenario
        for item in items:
            item_bids = [b for b in bids if b.bid_item_id == item.id]
            lowest = find_lowest_bid(item_bids)
            if lowest is None:
                continue
            assert all(lowest.amount <= b.amount for b in item_bids if b.qualifies)


class TestRankPackageBidders:
    """Per-subcontractor package totals."""

    def test_totals_only_member_submitted_priced_bids(self, bid_scenario):
        _, _, bids, packages = bid_scenario

        summary = rank_package_bidders(packages[0], bids)
        by_sub = {b.subcontractor_id: b for b in summary.bidders}

        # acme: 1000 (i1) + 500 (i2); volt: 900 (i1) only, i2 bids invited/unpriced, i3 not a member
        assert by_sub["acme"].total == Decimal("1500")
        assert by_sub["acme"].item_count == 2
        assert by_sub["volt"].total == Decimal("900")
        assert by_sub["volt"].item_count == 1

    def test_ranked_ascending_and_lowest_is_first(self, bid_scenario):
        _, _, bids, packages = bid_scenario

        summary = rank_package_bidders(packages[0], bids)

        totals = [b.total for b in summary.bidders]
        assert totals == sorted(totals)
        assert summary.lowest_bidder == summary.bidders[0]
        assert summary.lowest_bidder.company_name == "Volt Partners"

    def test_package_without_bids(self, bid_scenario):
        _, _, bids, packages = bid_scenario

        summary = rank_package_bidders(packages[1], bids)

        assert summary.bidders == ()
        assert summary.lowest_bidder is None

    def test_bids_without_subcontractor_are_not_ranked(self):
        package = ScopePackageRecord(id="pk", name="Pkg", bid_item_ids=["i1"])
        bids = [make_bid("b1", "i1", 100, sub=None), make_bid("b2", "i1", 200, make_sub("acme"))]

        summary = rank_package_bidders(package, bids)

        assert [b.subcontractor_id for b in summary.bidders] == ["acme"]


class TestAggregateSnapshot:
    """Full snapshot construction."""

    def test_every_item_has_bid_list(self, bid_scenario):
        project, items, bids, packages = bid_scenario
        items = items + [make_item("i4", "99-001")]

        snapshot = aggregate_snapshot(project, items, bids, packages)

        assert set(snapshot.bids_by_item) == {"i1", "i2", "i3", "i4"}
        assert snapshot.bids_by_item["i4"] == ()
        assert [b.id for b in snapshot.bids_by_item["i2"]] == ["b3", "b4", "b5"]
        assert snapshot.lowest_bids["i4"] is None

    def test_lowest_bids_and_package_summaries(self, bid_scenario):
        project, items, bids, packages = bid_scenario

        snapshot = aggregate_snapshot(project, items, bids, packages)

        assert snapshot.lowest_bids["i1"].id == "b2"
        assert snapshot.lowest_bids["i2"].id == "b3"
        assert snapshot.lowest_bids["i3"].id == "b6"
        assert set(snapshot.package_summaries) == {"pk1", "pk2"}

    def test_bids_on_unknown_items_are_dropped_from_map(self, project):
        items = [make_item("i1")]
        bids = [make_bid("b1", "i1", 10), make_bid("b2", "ghost", 5)]

        snapshot = aggregate_snapshot(project, items, bids, [])

        assert [b.id for b in snapshot.bids_by_item["i1"]] == ["b1"]
        assert "ghost" not in snapshot.bids_by_item

    def test_snapshot_is_frozen(self, bid_scenario):
        snapshot = aggregate_snapshot(*bid_scenario)

        with pytest.raises(ValidationError):
            snapshot.project = None

    def test_snapshot_collections_are_read_only(self, bid_scenario):
        snapshot = aggregate_snapshot(*bid_scenario)

        with pytest.raises(TypeError):
            snapshot.lowest_bids["i1"] = None
        with pytest.raises(TypeError):
            snapshot.package_summaries["pk9"] = snapshot.package_summaries["pk1"]
        with pytest.raises(AttributeError):
            snapshot.bids_by_item["i1"].append(snapshot.bids[0])
        with pytest.raises(AttributeError):
            snapshot.bid_items.append(snapshot.bid_items[0])
        with pytest.raises(AttributeError):
            snapshot.packages[0].bid_item_ids.append("i3")

    def test_snapshot_still_serializes(self, bid_scenario):
        dumped = aggregate_snapshot(*bid_scenario).model_dump()

        assert dumped["lowest_bids"]["i1"]["id"] == "b2"
        assert [b["id"] for b in dumped["bids_by_item"]["i2"]] == ["b3", "b4", "b5"]

    def test_empty_project(self, project):
        snapshot = aggregate_snapshot(project, [], [], [])

        assert snapshot.bids_by_item == {}
        assert snapshot.lowest_bids == {}
        assert snapshot.package_summaries == {}


def test_bid_aggregator_builds_from_queries(bid_scenario):
    """BidAggregator feeds fetched rows through aggregate_snapshot."""
    project, items, bids, packages = bid_scenario
    queries = Mock()
    queries.load_project_data.return_value = ProjectData(
        project=project, bid_items=items, bids=bids, packages=packages
    )

    snapshot = BidAggregator(queries).build("p1")

    queries.load_project_data.assert_called_once_with("p1")
    assert snapshot.project.name == "Riverside MOB"
    assert snapshot.package_summaries["pk1"].lowest_bidder.subcontractor_id == "volt"
