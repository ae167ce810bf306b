"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from velocity_limits.domain.locking import CustomerLocks
from velocity_limits.domain.velocity import VelocityEvaluator
from velocity_limits.infrastructure.database.repositories import LoadRecordRepository
from velocity_limits.infrastructure.database.session import get_db

# Shared by every request so evaluations for one customer never interleave
customer_locks = CustomerLocks()


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_repository(db: Session = Depends(get_db)) -> LoadRecordRepository:
    """Provide a load record repository bound to the request's session"""
    return LoadRecordRepository(db)


def get_evaluator(repository: LoadRecordRepository = Depends(get_repository)) -> VelocityEvaluator:
    """Provide a velocity evaluator backed by the database"""
    return VelocityEvaluator(repository, locks=customer_locks)
