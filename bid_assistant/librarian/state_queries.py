"""
Project Queries Module

Reads a project's bid data from the relational store.
Implements the "Librarian" logic: knows where the current state lives and
returns it as read-only records.
"""

import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from ..errors import DataUnavailableError, ProjectNotFoundError
from .db_client import DatabaseClient
from .models import Bid, BidItem, Project, ScopePackage
from .records import (
    BidItemRecord,
    BidRecord,
    ProjectData,
    ProjectRecord,
    ScopePackageRecord,
    SubcontractorRecord,
    TradeRecord,
)

logger = logging.getLogger(__name__)


class ProjectQueries:
    """
    High-level interface for reading a project's bid state.

    The project and scope-package reads run on a small thread pool while the
    calling thread reads bid items and then the bids scoped to them.
    """

    def __init__(self, db_client: DatabaseClient, max_workers: int = 2):
        """
        Initialize ProjectQueries with a DatabaseClient.

        Args:
            db_client: Connected DatabaseClient instance
            max_workers: Threads used for independent reads
        """
        self.client = db_client
        self.max_workers = max_workers
        logger.info("ProjectQueries initialized")

    def load_project_data(self, project_id: str) -> ProjectData:
        """
        Fetch everything the assistant needs to know about a project.

        Args:
            project_id: Project identifier (UUID string)

        Returns:
            ProjectData with the project, its bid items, their bids and the
            project's scope packages

        Raises:
            ProjectNotFoundError: If no project has this identifier
            DataUnavailableError: If any read fails
        """
        logger.info(f"Fetching bid data for project: {project_id}")
        key = _parse_id(project_id)

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            project_future = pool.submit(self.get_project, key)
            packages_future = pool.submit(self.get_scope_packages, key)

            bid_items = self.get_bid_items(key)
            bids = self.get_bids([uuid.UUID(item.id) for item in bid_items])

            project = project_future.result()
            packages = packages_future.result()

        data = ProjectData(project=project, bid_items=bid_items, bids=bids, packages=packages)
        logger.info(f"Project data retrieved: {len(bid_items)} bid items, "
                    f"{len(bids)} bids, {len(packages)} scope packages")
        return data

    def get_project(self, project_id: uuid.UUID) -> ProjectRecord:
        """
        Get the project record.

        Raises:
            ProjectNotFoundError: If the project does not exist
        """
        try:
            with self.client.get_session() as session:
                project = session.get(Project, project_id)
                if project is None:
                    logger.warning(f"Project not found: {project_id}")
                    raise ProjectNotFoundError(str(project_id))
                return ProjectRecord(
                    id=str(project.id),
                    name=project.name,
                    location=project.location,
                    bid_date=project.bid_date,
                    status=project.status or "bidding",
                )
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch project {project_id}: {e}")
            raise DataUnavailableError(f"Failed to fetch project: {e}")

    def get_bid_items(self, project_id: uuid.UUID) -> List[BidItemRecord]:
        """Get all bid items of a project, with their trade, in item-number order."""
        query = (
            select(BidItem)
            .where(BidItem.project_id == project_id)
            .options(selectinload(BidItem.trade))
            .order_by(BidItem.item_number, BidItem.created_at)
        )

        try:
            with self.client.get_session() as session:
                items = session.scalars(query).all()
                records = [
                    BidItemRecord(
                        id=str(item.id),
                        item_number=item.item_number,
                        description=item.description,
                        quantity=item.quantity,
                        unit=item.unit,
                        estimated_cost=item.estimated_cost,
                        trade=TradeRecord(division_code=item.trade.division_code, name=item.trade.name)
                        if item.trade else None,
                    )
                    for item in items
                ]
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch bid items for {project_id}: {e}")
            raise DataUnavailableError(f"Failed to fetch bid items: {e}")

        logger.debug(f"Retrieved {len(records)} bid items")
        return records

    def get_bids(self, bid_item_ids: Sequence[uuid.UUID]) -> List[BidRecord]:
        """Get all bids placed on the given bid items, with subcontractor identity."""
        if not bid_item_ids:
            return []

        query = (
            select(Bid)
            .where(Bid.bid_item_id.in_(bid_item_ids))
            .options(selectinload(Bid.subcontractor))
            .order_by(Bid.created_at)
        )

        try:
            with self.client.get_session() as session:
                bids = session.scalars(query).all()
                records = [
                    BidRecord(
                        id=str(bid.id),
                        bid_item_id=str(bid.bid_item_id),
                        amount=bid.amount,
                        status=bid.status,
                        notes=bid.notes,
                        submitted_at=bid.submitted_at,
                        subcontractor=SubcontractorRecord(
                            id=str(bid.subcontractor.id),
                            company_name=bid.subcontractor.company_name,
                            email=bid.subcontractor.email,
                        ) if bid.subcontractor else None,
                    )
                    for bid in bids
                ]
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch bids: {e}")
            raise DataUnavailableError(f"Failed to fetch bids: {e}")

        logger.debug(f"Retrieved {len(records)} bids")
        return records

    def get_scope_packages(self, project_id: uuid.UUID) -> List[ScopePackageRecord]:
        """Get all scope packages of a project with their member bid-item ids."""
        query = (
            select(ScopePackage)
            .where(ScopePackage.project_id == project_id)
            .options(selectinload(ScopePackage.bid_items))
            .order_by(ScopePackage.name)
        )

        try:
            with self.client.get_session() as session:
                packages = session.scalars(query).all()
                records = [
                    ScopePackageRecord(
                        id=str(package.id),
                        name=package.name,
                        description=package.description,
                        bid_item_ids=[str(item.id) for item in package.bid_items],
                    )
                    for package in packages
                ]
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch scope packages for {project_id}: {e}")
            raise DataUnavailableError(f"Failed to fetch scope packages: {e}")

        logger.debug(f"Retrieved {len(records)} scope packages")
        return records


def _parse_id(project_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(project_id))
    except ValueError:
        # Not a UUID, so it cannot name a stored project
        raise ProjectNotFoundError(str(project_id))
