"""Pydantic schemas for the load wire format (API bodies and JSON-lines files)"""

from decimal import Decimal
from typing import Any, List

from pydantic import AwareDatetime, BaseModel, Field, field_validator

from velocity_limits.domain.models import LoadRequest, LoadResponse


class LoadRequestSchema(BaseModel):
    """One load attempt, e.g. {"id": "15887", "customer_id": "528", "load_amount": "$3318.47", "time": "2000-01-01T00:00:00Z"}"""

    id: int = Field(..., ge=0, description="Load identifier, unique per customer")
    customer_id: int = Field(..., ge=0, description="Customer identifier")
    load_amount: Decimal = Field(..., ge=0, decimal_places=2, description="Amount in USD, optionally prefixed with $")
    time: AwareDatetime = Field(..., description="Attempt time with UTC offset")

    @field_validator("load_amount", mode="before")
    @classmethod
    def strip_currency_prefix(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("$"):
                value = value[1:]
        return value

    def to_domain(self) -> LoadRequest:
        return LoadRequest(
            id=self.id,
            customer_id=self.customer_id,
            amount=self.load_amount,
            time=self.time,
        )


class LoadResponseSchema(BaseModel):
    """Decision for a single load attempt"""

    id: str
    customer_id: str
    accepted: bool

    @classmethod
    def from_domain(cls, response: LoadResponse) -> "LoadResponseSchema":
        return cls(id=response.id, customer_id=response.customer_id, accepted=response.accepted)


class BatchLoadRequest(BaseModel):
    """Request body for POST /v1/load/batch"""

    loads: List[LoadRequestSchema] = Field(..., min_length=1)


class SkippedLoadSchema(BaseModel):
    """Load that was not evaluated because the store failed"""

    id: str
    customer_id: str
    error: str


class BatchLoadResponse(BaseModel):
    """Response for POST /v1/load/batch; duplicates are omitted from responses"""

    responses: List[LoadResponseSchema]
    skipped: List[SkippedLoadSchema]
    duplicates: int


class HistoryItem(BaseModel):
    """Single persisted load attempt"""

    id: str
    load_amount: str
    time: str
    accepted: bool


class HistoryResponse(BaseModel):
    """Response for GET /v1/load/history"""

    customer_id: str
    loads: List[HistoryItem]
