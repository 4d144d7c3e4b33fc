"""
Database Client

Manages the SQLAlchemy engine and hands out sessions for project reads.
"""

import json
import logging
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from sqlalchemy import create_engine, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .models import Base, Bid, BidItem, Project, ScopePackage, Subcontractor, Trade

logger = logging.getLogger(__name__)


class DatabaseClient:
    """
    Relational database client for the bid coordination tables.

    The engine is thread-safe; every unit of work gets its own session.
    """

    def __init__(self, url: str, echo: bool = False, engine: Optional[Engine] = None):
        """
        Initialize the database engine.

        Args:
            url: SQLAlchemy database URL (e.g., postgresql://user:pw@host/db)
            echo: Log every SQL statement
            engine: Pre-built engine to use instead of creating one
        """
        self.url = url
        logger.info(f"Initializing DatabaseClient for {url.split('@')[-1]}")

        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        self._engine: Optional[Engine] = engine or create_engine(
            url,
            echo=echo,
            pool_pre_ping=True,
            connect_args=connect_args,
        )
        self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)

    @property
    def engine(self) -> Engine:
        if not self._engine:
            raise RuntimeError("DatabaseClient has been closed")
        return self._engine

    def close(self) -> None:
        """Dispose of the engine's connection pool."""
        if self._engine:
            self._engine.dispose()
            self._engine = None
            logger.info("Database connection closed")

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        """
        Context manager for database sessions.

        Yields:
            SQLAlchemy Session; committed on success, rolled back on error

        Example:
            with client.get_session() as session:
                session.execute(select(Project))
        """
        session = self._session_factory(bind=self.engine)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def initialize_schema(self) -> None:
        """
        Create all tables that do not exist yet.

        Raises:
            RuntimeError: If schema creation fails
        """
        logger.info("Initializing database schema")
        try:
            Base.metadata.create_all(self.engine)
            logger.info("Schema initialized successfully")
        except SQLAlchemyError as e:
            logger.error(f"Schema initialization failed: {e}")
            raise RuntimeError(f"Failed to initialize schema: {e}")

    def load_data_from_json(self, data_file_path: str) -> str:
        """
        Load a sample project from a JSON file.

        The file holds a single project with nested ``bid_items`` (each with
        ``bids``) and ``scope_packages`` referencing items by ``item_number``.

        Args:
            data_file_path: Path to the JSON file

        Returns:
            Identifier of the created project

        Raises:
            FileNotFoundError: If the data file doesn't exist
            RuntimeError: If loading fails
        """
        logger.info(f"Loading data from {data_file_path}")

        with open(data_file_path, 'r') as f:
            data = json.load(f)

        try:
            with self.get_session() as session:
                project_id = self._insert_project(session, data)
            logger.info(f"Data loaded successfully (project {project_id})")
            return project_id
        except (SQLAlchemyError, KeyError, ValueError) as e:
            logger.error(f"Data loading failed: {e}")
            raise RuntimeError(f"Failed to load data: {e}")

    def _insert_project(self, session: Session, data: Dict[str, Any]) -> str:
        project = Project(
            name=data['name'],
            location=data.get('location'),
            bid_date=date.fromisoformat(data['bid_date']) if data.get('bid_date') else None,
            status=data.get('status', 'bidding'),
        )
        session.add(project)

        trades: Dict[str, Trade] = {}
        subcontractors: Dict[str, Subcontractor] = {}
        items_by_number: Dict[str, BidItem] = {}

        for item_data in data.get('bid_items', []):
            trade = None
            if item_data.get('trade'):
                code = item_data['trade']['division_code']
                trade = trades.get(code)
                if trade is None:
                    trade = session.scalar(select(Trade).where(Trade.division_code == code))
                    if trade is None:
                        trade = Trade(division_code=code, name=item_data['trade']['name'])
                    trades[code] = trade

            item = BidItem(
                project=project,
                trade=trade,
                item_number=item_data.get('item_number'),
                description=item_data['description'],
                quantity=item_data.get('quantity'),
                unit=item_data.get('unit'),
                estimated_cost=_to_decimal(item_data.get('estimated_cost')),
            )
            session.add(item)
            if item.item_number:
                items_by_number[item.item_number] = item

            for bid_data in item_data.get('bids', []):
                company = bid_data.get('company_name')
                subcontractor = None
                if company:
                    subcontractor = subcontractors.get(company)
                    if subcontractor is None:
                        subcontractor = session.scalar(
                            select(Subcontractor).where(Subcontractor.company_name == company).limit(1)
                        )
                    if subcontractor is None:
                        subcontractor = Subcontractor(company_name=company, email=bid_data.get('email'))
                    subcontractors[company] = subcontractor
                session.add(Bid(
                    bid_item=item,
                    subcontractor=subcontractor,
                    amount=_to_decimal(bid_data.get('amount')),
                    status=bid_data.get('status', 'submitted'),
                    notes=bid_data.get('notes'),
                    submitted_at=datetime.fromisoformat(bid_data['submitted_at'])
                    if bid_data.get('submitted_at') else None,
                ))

        for package_data in data.get('scope_packages', []):
            session.add(ScopePackage(
                project=project,
                name=package_data['name'],
                description=package_data.get('description'),
                bid_items=[items_by_number[n] for n in package_data.get('item_numbers', [])],
            ))

        session.flush()
        return str(project.id)

    def health_check(self) -> bool:
        """
        Check if the database connection is healthy.

        Returns:
            True if connection is healthy, False otherwise
        """
        try:
            with self.engine.connect() as conn:
                return conn.execute(text("SELECT 1")).scalar() == 1
        except SQLAlchemyError as e:
            logger.error(f"Health check failed: {e}")
            return False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(value))
