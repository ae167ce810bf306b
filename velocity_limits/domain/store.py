"""Aggregate store contract consumed by the velocity evaluator"""

from datetime import datetime
from decimal import Decimal
from typing import Protocol

from velocity_limits.domain.models import LoadRecord


class AggregateStore(Protocol):
    """
    Persistent history of load records.

    Range queries are half-open: ``start <= time < end``, scoped to one customer
    and to accepted records only. Read failures raise StoreReadError, save
    failures raise StoreWriteError.
    """

    def exists(self, load_id: int, customer_id: int) -> bool:
        ...

    def count_accepted(self, customer_id: int, start: datetime, end: datetime) -> int:
        ...

    def sum_accepted(self, customer_id: int, start: datetime, end: datetime) -> Decimal:
        ...

    def save(self, record: LoadRecord) -> None:
        ...
