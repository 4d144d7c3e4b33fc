"""
Librarian Module

Manages relational database access for project bid data.
Handles project reads and derives bid aggregates.
"""

from .aggregator import BidAggregator, aggregate_snapshot
from .db_client import DatabaseClient
from .state_queries import ProjectQueries

__all__ = ["BidAggregator", "DatabaseClient", "ProjectQueries", "aggregate_snapshot"]
