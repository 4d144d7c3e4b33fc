"""
Shared fixtures for the bid assistant tests.
"""

from decimal import Decimal
from pathlib import Path
from typing import Optional

import pytest

from bid_assistant.librarian.db_client import DatabaseClient
from bid_assistant.librarian.records import (
    BidItemRecord,
    BidRecord,
    ProjectRecord,
    ScopePackageRecord,
    SubcontractorRecord,
    TradeRecord,
)

SAMPLE_DATA = Path(__file__).parent.parent / 'data' / 'sample_project.json'


def make_sub(sub_id: str, company: Optional[str] = None) -> SubcontractorRecord:
    return SubcontractorRecord(id=sub_id, company_name=company or f"{sub_id.title()} Co")


def make_item(item_id: str, number: Optional[str] = None, description: str = "Work item",
              trade: Optional[str] = None) -> BidItemRecord:
    return BidItemRecord(
        id=item_id,
        item_number=number or item_id,
        description=description,
        trade=TradeRecord(division_code="26", name=trade) if trade else None,
    )


def make_bid(bid_id: str, item_id: str, amount, sub: Optional[SubcontractorRecord] = None,
             status: str = "submitted") -> BidRecord:
    return BidRecord(
        id=bid_id,
        bid_item_id=item_id,
        amount=Decimal(str(amount)) if amount is not None else None,
        status=status,
        subcontractor=sub,
    )


@pytest.fixture
def project():
    return ProjectRecord(id="p1", name="Riverside MOB", location="Springfield", status="bidding")


@pytest.fixture
def bid_scenario(project):
    """Three items, two packages and a mix of qualifying and non-qualifying bids."""
    acme = make_sub("acme", "Acme Electric")
    volt = make_sub("volt", "Volt Partners")
    items = [
        make_item("i1", "26-001", "Branch wiring", trade="Electrical"),
        make_item("i2", "26-002", "Lighting"),
        make_item("i3", "03-001", "Footings"),
    ]
    bids = [
        make_bid("b1", "i1", 1000, acme),
        make_bid("b2", "i1", 900, volt),
        make_bid("b3", "i2", 500, acme),
        make_bid("b4", "i2", 300, volt, status="invited"),
        make_bid("b5", "i2", None, volt),
        make_bid("b6", "i3", 7000, volt),
    ]
    packages = [
        ScopePackageRecord(id="pk1", name="Electrical", bid_item_ids=["i1", "i2"]),
        ScopePackageRecord(id="pk2", name="Empty", bid_item_ids=[]),
    ]
    return project, items, bids, packages


@pytest.fixture
def db_client(tmp_path):
    """SQLite-backed client with the schema created."""
    client = DatabaseClient(f"sqlite:///{tmp_path / 'bids.db'}")
    client.initialize_schema()
    yield client
    client.close()


@pytest.fixture
def sample_project_id(db_client):
    return db_client.load_data_from_json(str(SAMPLE_DATA))
