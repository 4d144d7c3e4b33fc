"""
Database Models

SQLAlchemy models for the bid coordination tables read by the assistant.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Table,
    Text,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


# ============================================
# Association: scope packages <-> bid items
# ============================================

scope_package_items = Table(
    "scope_package_items",
    Base.metadata,
    Column("scope_package_id", Uuid, ForeignKey("scope_packages.id", ondelete="CASCADE"), primary_key=True),
    Column("bid_item_id", Uuid, ForeignKey("bid_items.id", ondelete="CASCADE"), primary_key=True),
)


class Trade(Base):
    """CSI division a bid item is categorized under."""
    __tablename__ = "trades"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    division_code: Mapped[str] = mapped_column(String(10), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)


class Subcontractor(Base):
    """Subcontracting company that submits bids."""
    __tablename__ = "subcontractors"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_name: Mapped[str] = mapped_column(String(200), nullable=False)
    contact_name: Mapped[Optional[str]] = mapped_column(String(100))
    email: Mapped[Optional[str]] = mapped_column(String(120))


class Project(Base):
    """Construction project out for bid."""
    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(300))
    bid_date: Mapped[Optional[date]] = mapped_column(Date)
    status: Mapped[str] = mapped_column(String(50), default="bidding")  # bidding, awarded, in_progress, completed, lost
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    bid_items: Mapped[List["BidItem"]] = relationship(
        "BidItem", back_populates="project", cascade="all, delete-orphan"
    )
    scope_packages: Mapped[List["ScopePackage"]] = relationship(
        "ScopePackage", back_populates="project", cascade="all, delete-orphan"
    )


class BidItem(Base):
    """Line item within a project that subcontractors bid against."""
    __tablename__ = "bid_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    trade_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, ForeignKey("trades.id"))
    item_number: Mapped[Optional[str]] = mapped_column(String(20))
    description: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[Optional[str]] = mapped_column(String(50))
    unit: Mapped[Optional[str]] = mapped_column(String(20))
    estimated_cost: Mapped[Optional[Decimal]] = mapped_column(Numeric(15, 2))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    project: Mapped["Project"] = relationship("Project", back_populates="bid_items")
    trade: Mapped[Optional["Trade"]] = relationship("Trade")
    bids: Mapped[List["Bid"]] = relationship("Bid", back_populates="bid_item", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_bid_items_project", "project_id"),
    )


class Bid(Base):
    """A subcontractor's price for one bid item."""
    __tablename__ = "bids"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    bid_item_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("bid_items.id", ondelete="CASCADE"), nullable=False
    )
    subcontractor_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, ForeignKey("subcontractors.id"))
    amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(15, 2))
    status: Mapped[str] = mapped_column(String(50), default="invited")  # invited, submitted, accepted, rejected, withdrawn
    notes: Mapped[Optional[str]] = mapped_column(Text)
    submitted_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    bid_item: Mapped["BidItem"] = relationship("BidItem", back_populates="bids")
    subcontractor: Mapped[Optional["Subcontractor"]] = relationship("Subcontractor")

    __table_args__ = (
        Index("idx_bids_item", "bid_item_id"),
        Index("idx_bids_subcontractor", "subcontractor_id"),
    )


class ScopePackage(Base):
    """Named grouping of bid items awarded as a bundle."""
    __tablename__ = "scope_packages"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    project: Mapped["Project"] = relationship("Project", back_populates="scope_packages")
    bid_items: Mapped[List["BidItem"]] = relationship("BidItem", secondary=scope_package_items)

    __table_args__ = (
        Index("idx_scope_packages_project", "project_id"),
    )
