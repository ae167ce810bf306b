"""Data access layer for load records"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import List

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from velocity_limits.infrastructure.database.models import LoadFundsRecord
from velocity_limits.domain.exceptions import StoreReadError, StoreWriteError
from velocity_limits.domain.models import LoadRecord
from velocity_limits.utils.date_utils import to_utc

CENTS = Decimal(100)


def to_cents(amount: Decimal) -> int:
    """Convert a currency amount to integer cents, refusing sub-cent precision"""
    cents = amount * CENTS
    if cents != cents.to_integral_value():
        raise ValueError(f"Amount {amount} has more than two decimal places")
    return int(cents)


def from_cents(cents: int) -> Decimal:
    return Decimal(int(cents)).scaleb(-2)


class LoadRecordRepository:
    """AggregateStore implementation on top of a SQLAlchemy session"""

    def __init__(self, db: Session):
        self.db = db

    def exists(self, load_id: int, customer_id: int) -> bool:
        """Check whether this (id, customer_id) pair was already processed"""
        try:
            query = self.db.query(LoadFundsRecord).filter(
                LoadFundsRecord.id == load_id,
                LoadFundsRecord.customer_id == customer_id,
            )
            return bool(self.db.query(query.exists()).scalar())
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreReadError(f"Duplicate check failed for load {load_id}: {e}") from e

    def _accepted_in_range(self, query, customer_id: int, start: datetime, end: datetime):
        return query.filter(
            LoadFundsRecord.customer_id == customer_id,
            LoadFundsRecord.accepted.is_(True),
            LoadFundsRecord.time >= to_utc(start),
            LoadFundsRecord.time < to_utc(end),
        )

    def count_accepted(self, customer_id: int, start: datetime, end: datetime) -> int:
        """Number of accepted loads in [start, end)"""
        try:
            query = self.db.query(func.count(LoadFundsRecord.id))
            return self._accepted_in_range(query, customer_id, start, end).scalar() or 0
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreReadError(f"Load count failed for customer {customer_id}: {e}") from e

    def sum_accepted(self, customer_id: int, start: datetime, end: datetime) -> Decimal:
        """Sum of accepted load amounts in [start, end); zero when nothing matches"""
        try:
            query = self.db.query(func.coalesce(func.sum(LoadFundsRecord.amount_cents), 0))
            total_cents = self._accepted_in_range(query, customer_id, start, end).scalar()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreReadError(f"Load sum failed for customer {customer_id}: {e}") from e
        return from_cents(total_cents)

    def save(self, record: LoadRecord) -> None:
        """Persist a load record and commit so later evaluations see it"""
        try:
            amount_cents = to_cents(record.amount)
        except ValueError as e:
            raise StoreWriteError(str(e)) from e

        self.db.add(
            LoadFundsRecord(
                id=record.id,
                customer_id=record.customer_id,
                amount_cents=amount_cents,
                time=to_utc(record.time),
                accepted=record.accepted,
            )
        )
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreWriteError(f"Could not save load {record.id} for customer {record.customer_id}: {e}") from e

    def history(self, customer_id: int, limit: int = 10) -> List[LoadRecord]:
        """Fetch recent load records for a customer"""
        try:
            rows = (
                self.db.query(LoadFundsRecord)
                .filter(LoadFundsRecord.customer_id == customer_id)
                .order_by(LoadFundsRecord.time.desc())
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreReadError(f"History lookup failed for customer {customer_id}: {e}") from e

        return [
            LoadRecord(
                id=row.id,
                customer_id=row.customer_id,
                amount=from_cents(row.amount_cents),
                # SQLite drops the offset; values are stored in UTC
                time=row.time if row.time.tzinfo else row.time.replace(tzinfo=timezone.utc),
                accepted=row.accepted,
            )
            for row in rows
        ]
