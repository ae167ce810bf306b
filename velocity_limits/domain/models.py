"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from velocity_limits.domain.exceptions import InvalidLoadRequestError


@dataclass(frozen=True)
class LoadRequest:
    """Funds-loading attempt, already parsed from the wire format"""

    id: int
    customer_id: int
    amount: Decimal
    time: datetime

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise InvalidLoadRequestError(f"Load amount must be non-negative, got {self.amount}")
        if self.time.tzinfo is None or self.time.utcoffset() is None:
            raise InvalidLoadRequestError("Load time must carry a UTC offset")


@dataclass(frozen=True)
class LoadRecord:
    """Persisted load attempt with its decision; written once, never updated"""

    id: int
    customer_id: int
    amount: Decimal
    time: datetime
    accepted: bool

    @classmethod
    def from_request(cls, request: LoadRequest, accepted: bool) -> "LoadRecord":
        return cls(
            id=request.id,
            customer_id=request.customer_id,
            amount=request.amount,
            time=request.time,
            accepted=accepted,
        )


@dataclass(frozen=True)
class LoadResponse:
    """Decision returned for a non-duplicate load attempt"""

    id: str
    customer_id: str
    accepted: bool


class RejectionReason(str, Enum):
    """Why a load was not accepted (logs and metrics only)"""

    DAILY_LOAD_COUNT = "daily_load_count"
    DAILY_AMOUNT = "daily_amount"
    WEEKLY_AMOUNT = "weekly_amount"
    STORE_WRITE_FAILED = "store_write_failed"


@dataclass(frozen=True)
class LoadDecision:
    """Outcome of evaluating one request; response is None for duplicates"""

    request: LoadRequest
    response: Optional[LoadResponse]
    rejection_reason: Optional[RejectionReason] = None

    @property
    def duplicate(self) -> bool:
        return self.response is None

    @property
    def outcome(self) -> str:
        if self.response is None:
            return "duplicate"
        return "accepted" if self.response.accepted else "rejected"
