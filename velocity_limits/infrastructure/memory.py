"""In-memory aggregate store.

Records are indexed by customer id so the range queries only scan one
customer's history. Data lives in process memory and is lost on exit, which
suits tests and one-shot batch runs.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Set, Tuple

from velocity_limits.domain.exceptions import StoreWriteError
from velocity_limits.domain.models import LoadRecord
from velocity_limits.utils.date_utils import to_utc

CENT = Decimal("0.01")


class InMemoryAggregateStore:
    """AggregateStore backed by plain dicts"""

    def __init__(self) -> None:
        self._records: Dict[int, List[LoadRecord]] = {}
        # (id, customer_id) pairs already saved
        self._keys: Set[Tuple[int, int]] = set()

    def exists(self, load_id: int, customer_id: int) -> bool:
        return (load_id, customer_id) in self._keys

    def _accepted_in_range(self, customer_id: int, start: datetime, end: datetime) -> List[LoadRecord]:
        start, end = to_utc(start), to_utc(end)
        return [
            r
            for r in self._records.get(customer_id, [])
            if r.accepted and start <= to_utc(r.time) < end
        ]

    def count_accepted(self, customer_id: int, start: datetime, end: datetime) -> int:
        return len(self._accepted_in_range(customer_id, start, end))

    def sum_accepted(self, customer_id: int, start: datetime, end: datetime) -> Decimal:
        return sum((r.amount for r in self._accepted_in_range(customer_id, start, end)), Decimal("0"))

    def save(self, record: LoadRecord) -> None:
        if record.amount % CENT != 0:
            raise StoreWriteError(f"Amount {record.amount} has more than two decimal places")
        key = (record.id, record.customer_id)
        if key in self._keys:
            raise StoreWriteError(f"Load {record.id} for customer {record.customer_id} already saved")
        self._keys.add(key)
        self._records.setdefault(record.customer_id, []).append(record)

    def history(self, customer_id: int, limit: int = 10) -> List[LoadRecord]:
        """Most recent records for a customer, newest first"""
        records = sorted(self._records.get(customer_id, []), key=lambda r: to_utc(r.time), reverse=True)
        return records[:limit]

    def __len__(self) -> int:
        return len(self._keys)
