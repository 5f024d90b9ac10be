"""
Transaction store - the narrow interface every handler talks to.

Handlers never touch the ORM session directly. They hand filter conditions
(built by utils/filter_builder.py) to a TransactionStore, which owns query
execution. The SQL implementation below runs on the Flask-SQLAlchemy
session; another backend only needs to implement the same six methods.

Usage:
    from db.store import get_store

    store = get_store()
    rows = store.find_page(conditions, offset=0, limit=10)
    totals = store.filtered_totals(conditions)
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Sequence

from sqlalchemy import func, insert, select
from sqlalchemy.exc import SQLAlchemyError

from constants import GROUPABLE_FIELDS, PRICE_BUCKET_BOUNDARIES


class TransactionStore(ABC):
    """Read/replace operations over the transaction collection."""

    @abstractmethod
    def find_page(self, conditions: Sequence[Any], offset: int, limit: int) -> List[Dict[str, Any]]:
        """Matching records in insertion order, serialized with to_dict()."""

    @abstractmethod
    def count(self, conditions: Sequence[Any]) -> int:
        """Number of matching records, ignoring pagination."""

    @abstractmethod
    def filtered_totals(self, conditions: Sequence[Any]) -> Dict[str, Any]:
        """{totalSales, totalSold, totalNotSold}, zero-filled when nothing matches."""

    @abstractmethod
    def price_histogram(
        self,
        conditions: Sequence[Any],
        boundaries: Sequence[float] = PRICE_BUCKET_BOUNDARIES,
    ) -> List[Dict[str, Any]]:
        """Non-empty price buckets with counts."""

    @abstractmethod
    def group_count(self, conditions: Sequence[Any], field: str) -> List[Dict[str, Any]]:
        """[{_id: value, count}] per distinct value of `field`."""

    @abstractmethod
    def replace_all(self, records: Iterable[Any]) -> Dict[str, int]:
        """Atomically replace every record; returns {'deleted', 'inserted'}."""


class SqlTransactionStore(TransactionStore):
    """TransactionStore over the Flask-SQLAlchemy session of the current app context."""

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        if self._session is not None:
            return self._session
        from models.database import db
        return db.session

    def find_page(self, conditions, offset, limit):
        from models.transaction import Transaction

        rows = (
            self.session.query(Transaction)
            .filter(*conditions)
            .order_by(Transaction.row_id)
            .offset(offset)
            .limit(limit)
            .all()
        )
        return [row.to_dict() for row in rows]

    def count(self, conditions):
        from models.transaction import Transaction

        stmt = select(func.count(Transaction.row_id)).where(*conditions)
        return int(self.session.execute(stmt).scalar() or 0)

    def filtered_totals(self, conditions):
        from services.aggregation_service import build_totals_query, shape_totals

        row = self.session.execute(build_totals_query(conditions)).first()
        return shape_totals(row)

    def price_histogram(self, conditions, boundaries=PRICE_BUCKET_BOUNDARIES):
        from services.aggregation_service import build_histogram_query, shape_histogram

        rows = self.session.execute(build_histogram_query(conditions, boundaries)).all()
        return shape_histogram(rows, boundaries)

    def group_count(self, conditions, field):
        from models.transaction import Transaction
        from services.aggregation_service import build_group_count_query, shape_group_counts

        if field not in GROUPABLE_FIELDS:
            raise ValueError(f"Cannot group by {field!r}; expected one of {GROUPABLE_FIELDS}")
        column = getattr(Transaction, field)
        rows = self.session.execute(build_group_count_query(conditions, column)).all()
        return shape_group_counts(rows)

    def replace_all(self, records):
        """
        Delete every row and insert `records` in one database transaction.

        On any failure the transaction is rolled back, leaving the previous
        contents in place.
        """
        from models.transaction import Transaction

        mappings = [Transaction.insert_mapping(r) for r in records]

        session = self.session
        try:
            deleted = session.query(Transaction).delete(synchronize_session=False)
            if mappings:
                session.execute(insert(Transaction), mappings)
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            raise

        return {'deleted': int(deleted or 0), 'inserted': len(mappings)}


def get_store() -> TransactionStore:
    """Store bound to the current app context (one session per context)."""
    return SqlTransactionStore()
