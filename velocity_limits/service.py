"""Load processing: runs the evaluator and records logs/metrics per decision"""

import logging
import time
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from velocity_limits.domain.exceptions import StoreReadError
from velocity_limits.domain.models import LoadDecision, LoadRequest, LoadResponse
from velocity_limits.domain.velocity import VelocityEvaluator
from velocity_limits.infrastructure.observability.logging import log_load_decision
from velocity_limits.infrastructure.observability.metrics import (
    record_load_decision,
    store_read_failure_counter,
)


@dataclass
class SkippedLoad:
    """Request that could not be evaluated because the store failed to answer"""

    id: int
    customer_id: int
    error: str


@dataclass
class BatchResult:
    """Responses in input order, plus the requests that were skipped"""

    responses: List[LoadResponse] = field(default_factory=list)
    skipped: List[SkippedLoad] = field(default_factory=list)
    duplicates: int = 0


def process_load(
    evaluator: VelocityEvaluator,
    request: LoadRequest,
    request_id: str = "batch",
) -> LoadDecision:
    """
    Evaluate one load and record its outcome.

    Raises:
        StoreReadError: Propagated from the evaluator after being counted
    """
    start_time = time.time()
    try:
        decision = evaluator.assess(request)
    except StoreReadError:
        store_read_failure_counter.inc()
        raise

    duration = time.time() - start_time
    reason = decision.rejection_reason.value if decision.rejection_reason else None
    record_load_decision(decision.outcome, reason, duration)
    log_load_decision(request_id, request.id, request.customer_id, decision.outcome, reason, duration * 1000)
    return decision


def process_batch(
    requests: Iterable[LoadRequest],
    evaluator: VelocityEvaluator,
    request_id: Optional[str] = None,
) -> BatchResult:
    """
    Evaluate requests one at a time, in order.

    Duplicates produce no response. A store read failure skips only that
    request; evaluation continues with the next one.
    """
    result = BatchResult()
    for request in requests:
        try:
            decision = process_load(evaluator, request, request_id or "batch")
        except StoreReadError as e:
            logging.error(
                f"Skipping load, store read failed: {e}",
                extra={"load_id": request.id, "customer_id": request.customer_id},
            )
            result.skipped.append(SkippedLoad(id=request.id, customer_id=request.customer_id, error=str(e)))
            continue

        if decision.response is None:
            result.duplicates += 1
        else:
            result.responses.append(decision.response)

    return result
