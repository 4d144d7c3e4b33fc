"""
Snapshot Records

Read-only, per-request views of the project data and the aggregates derived
from it. Records are frozen once built.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class BidStatus(str, Enum):
    """Lifecycle states of a bid."""
    INVITED = "invited"
    SUBMITTED = "submitted"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class ProjectRecord(Record):
    """Project being bid."""
    id: str = Field(..., description="Project identifier")
    name: str = Field(..., description="Project name")
    location: Optional[str] = Field(None, description="Site location")
    bid_date: Optional[date] = Field(None, description="Date bids are due")
    status: str = Field("bidding", description="Project status")


class TradeRecord(Record):
    """Trade (CSI division) of a bid item."""
    division_code: str
    name: str


class SubcontractorRecord(Record):
    """Identity of a bidding subcontractor."""
    id: str
    company_name: str
    email: Optional[str] = None


class BidItemRecord(Record):
    """Line item subcontractors bid against."""
    id: str
    item_number: Optional[str] = None
    description: str
    quantity: Optional[str] = None
    unit: Optional[str] = None
    estimated_cost: Optional[Decimal] = None
    trade: Optional[TradeRecord] = None


class BidRecord(Record):
    """A subcontractor's price for a bid item."""
    id: str
    bid_item_id: str
    amount: Optional[Decimal] = None
    status: str = BidStatus.INVITED.value
    notes: Optional[str] = None
    submitted_at: Optional[datetime] = None
    subcontractor: Optional[SubcontractorRecord] = None

    @property
    def qualifies(self) -> bool:
        """True when the bid is submitted and carries an amount."""
        return self.status == BidStatus.SUBMITTED.value and self.amount is not None

    @property
    def company_name(self) -> str:
        return self.subcontractor.company_name if self.subcontractor else "Unknown"


class ScopePackageRecord(Record):
    """Named grouping of bid items."""
    id: str
    name: str
    description: Optional[str] = None
    bid_item_ids: Tuple[str, ...] = ()


class PackageBidder(Record):
    """One subcontractor's combined price across a package's items."""
    subcontractor_id: str
    company_name: str
    total: Decimal
    item_count: int


class PackageSummary(Record):
    """Ranked bidders for a scope package."""
    package: ScopePackageRecord
    bidders: Tuple[PackageBidder, ...] = ()
    lowest_bidder: Optional[PackageBidder] = None


class ProjectData(Record):
    """Raw rows fetched for one project."""
    project: ProjectRecord
    bid_items: List[BidItemRecord] = Field(default_factory=list)
    bids: List[BidRecord] = Field(default_factory=list)
    packages: List[ScopePackageRecord] = Field(default_factory=list)


class ProjectSnapshot(Record):
    """
    Fetched project data bundled with everything derived from it.

    Sequences are tuples and maps are read-only views, so nothing can change
    once aggregation has built the snapshot.
    """
    project: ProjectRecord
    bid_items: Tuple[BidItemRecord, ...] = ()
    bids: Tuple[BidRecord, ...] = ()
    bids_by_item: Mapping[str, Tuple[BidRecord, ...]] = Field(default_factory=dict, validate_default=True)
    lowest_bids: Mapping[str, Optional[BidRecord]] = Field(default_factory=dict, validate_default=True)
    packages: Tuple[ScopePackageRecord, ...] = ()
    package_summaries: Mapping[str, PackageSummary] = Field(default_factory=dict, validate_default=True)

    @field_validator("bids_by_item", "lowest_bids", "package_summaries")
    @classmethod
    def read_only(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("bids_by_item", "lowest_bids", "package_summaries")
    def serialize_mapping(self, value: Mapping[str, Any]) -> Dict[str, Any]:
        return dict(value)
