"""Velocity-limit evaluator - core business logic for load decisions"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from velocity_limits.domain.exceptions import StoreWriteError
from velocity_limits.domain.limits import LOAD_LIMITS, LoadLimits
from velocity_limits.domain.locking import CustomerLocks
from velocity_limits.domain.models import (
    LoadDecision,
    LoadRecord,
    LoadRequest,
    LoadResponse,
    RejectionReason,
)
from velocity_limits.domain.store import AggregateStore
from velocity_limits.utils.date_utils import end_of_day, start_of_day, start_of_week

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadWindows:
    """UTC ranges the limit checks aggregate over (end exclusive)"""

    day_start: datetime
    day_end: datetime
    week_start: datetime


def compute_windows(request_time: datetime) -> LoadWindows:
    """
    Derive the daily and weekly windows for a request.

    The weekly window is [week_start, day_end): it runs through the end of the
    request's day, not just up to the request instant.
    """
    return LoadWindows(
        day_start=start_of_day(request_time),
        day_end=end_of_day(request_time),
        week_start=start_of_week(request_time),
    )


class VelocityEvaluator:
    """Accepts or rejects load attempts against daily and weekly velocity limits"""

    def __init__(
        self,
        store: AggregateStore,
        limits: LoadLimits = LOAD_LIMITS,
        locks: Optional[CustomerLocks] = None,
    ):
        self.store = store
        self.limits = limits
        self.locks = locks or CustomerLocks()

    def evaluate(self, request: LoadRequest) -> Optional[LoadResponse]:
        """Return the response for a request, or None when it is a duplicate"""
        return self.assess(request).response

    def assess(self, request: LoadRequest) -> LoadDecision:
        """
        Evaluate one load request and persist its record.

        Flow:
        1. Duplicate (id, customer_id) -> no response, no record
        2. Daily count, daily amount, weekly amount checks (first rejection wins)
        3. Save the record, rejected ones included
        4. A failed save downgrades the response to accepted=False

        Raises:
            StoreReadError: An aggregate query failed; nothing was saved
        """
        with self.locks.hold(request.customer_id):
            logger.info(
                "Handling load request",
                extra={"load_id": request.id, "customer_id": request.customer_id},
            )

            if self.store.exists(request.id, request.customer_id):
                logger.info(
                    "Duplicate load request ignored",
                    extra={"load_id": request.id, "customer_id": request.customer_id},
                )
                return LoadDecision(request=request, response=None)

            reason = self._check_limits(request)
            accepted = reason is None

            try:
                self.store.save(LoadRecord.from_request(request, accepted))
            except StoreWriteError:
                logger.exception(
                    "Failed to save load record",
                    extra={"load_id": request.id, "customer_id": request.customer_id},
                )
                accepted = False
                reason = RejectionReason.STORE_WRITE_FAILED

        response = LoadResponse(
            id=str(request.id),
            customer_id=str(request.customer_id),
            accepted=accepted,
        )
        return LoadDecision(request=request, response=response, rejection_reason=reason)

    def _check_limits(self, request: LoadRequest) -> Optional[RejectionReason]:
        """Return the first limit the request breaks, or None if all pass"""
        windows = compute_windows(request.time)
        customer_id = request.customer_id

        loads_today = self.store.count_accepted(customer_id, windows.day_start, windows.day_end)
        if loads_today >= self.limits.loads_per_day:
            logger.info(
                "Daily load count limit reached",
                extra={"customer_id": customer_id, "loads_today": loads_today},
            )
            return RejectionReason.DAILY_LOAD_COUNT

        amount_today = self.store.sum_accepted(customer_id, windows.day_start, windows.day_end)
        if _reaches(amount_today, request.amount, self.limits.amount_per_day):
            logger.info(
                "Daily amount limit reached",
                extra={"customer_id": customer_id, "amount_today": str(amount_today)},
            )
            return RejectionReason.DAILY_AMOUNT

        amount_this_week = self.store.sum_accepted(customer_id, windows.week_start, windows.day_end)
        if _reaches(amount_this_week, request.amount, self.limits.amount_per_week):
            logger.info(
                "Weekly amount limit reached",
                extra={"customer_id": customer_id, "amount_this_week": str(amount_this_week)},
            )
            return RejectionReason.WEEKLY_AMOUNT

        return None


def _reaches(already_loaded: Decimal, amount: Decimal, limit: Decimal) -> bool:
    return already_loaded + amount >= limit
