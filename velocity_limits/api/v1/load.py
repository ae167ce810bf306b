"""POST /v1/load and /v1/load/batch - velocity-limit decisions for load attempts"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request, Response

from velocity_limits.api.v1.schemas import (
    BatchLoadRequest,
    BatchLoadResponse,
    LoadRequestSchema,
    LoadResponseSchema,
    SkippedLoadSchema,
)
from velocity_limits.api.dependencies import get_evaluator, get_request_id
from velocity_limits.domain.exceptions import StoreReadError
from velocity_limits.domain.velocity import VelocityEvaluator
from velocity_limits.service import process_batch, process_load

router = APIRouter()


@router.post(
    "/load",
    response_model=LoadResponseSchema,
    responses={204: {"description": "Duplicate load, already processed"}},
)
def create_load(
    request_body: LoadRequestSchema,
    request: Request,
    evaluator: VelocityEvaluator = Depends(get_evaluator),
):
    """
    Accept or reject a single load attempt.

    Flow:
    1. Duplicate (id, customer_id) -> 204, nothing stored
    2. Daily count, daily amount, weekly amount limit checks
    3. Persist the attempt (rejected ones too) and return the decision
    """
    request_id = get_request_id(request)
    load_request = request_body.to_domain()

    try:
        decision = process_load(evaluator, load_request, request_id)
    except StoreReadError as e:
        logging.error(f"Store read error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Load history unavailable")

    if decision.response is None:
        return Response(status_code=204)

    return LoadResponseSchema.from_domain(decision.response)


@router.post("/load/batch", response_model=BatchLoadResponse)
def create_load_batch(
    request_body: BatchLoadRequest,
    request: Request,
    evaluator: VelocityEvaluator = Depends(get_evaluator),
):
    """
    Evaluate load attempts in the given order.

    Duplicates are left out of the responses; loads whose history could not
    be read are reported under "skipped" and do not stop the batch.
    """
    request_id = get_request_id(request)
    result = process_batch((load.to_domain() for load in request_body.loads), evaluator, request_id)

    return BatchLoadResponse(
        responses=[LoadResponseSchema.from_domain(r) for r in result.responses],
        skipped=[
            SkippedLoadSchema(id=str(s.id), customer_id=str(s.customer_id), error=s.error)
            for s in result.skipped
        ],
        duplicates=result.duplicates,
    )
