"""GET /v1/load/history - Fetch a customer's processed load attempts"""

from fastapi import APIRouter, Depends, HTTPException, Query

from velocity_limits.api.v1.schemas import HistoryResponse, HistoryItem
from velocity_limits.api.dependencies import get_repository
from velocity_limits.config import settings
from velocity_limits.domain.exceptions import StoreReadError
from velocity_limits.infrastructure.database.repositories import LoadRecordRepository

router = APIRouter()


@router.get("/load/history", response_model=HistoryResponse)
def get_load_history(
    customer_id: int = Query(..., ge=0, description="Customer identifier"),
    repository: LoadRecordRepository = Depends(get_repository),
):
    """
    Retrieve recent load attempts for a customer.

    Returns:
        Accepted and rejected loads, newest first
    """
    try:
        records = repository.history(customer_id, limit=settings.history_max_items)
    except StoreReadError:
        raise HTTPException(status_code=503, detail="Load history unavailable")

    history_items = [
        HistoryItem(
            id=str(r.id),
            load_amount=f"${r.amount:.2f}",
            time=r.time.isoformat(),
            accepted=r.accepted,
        )
        for r in records
    ]

    return HistoryResponse(customer_id=str(customer_id), loads=history_items)
