"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from velocity_limits.api.main import create_app
from velocity_limits.domain.models import LoadRecord, LoadRequest
from velocity_limits.domain.velocity import VelocityEvaluator
from velocity_limits.infrastructure.database.models import Base
from velocity_limits.infrastructure.database.session import build_engine, get_db
from velocity_limits.infrastructure.memory import InMemoryAggregateStore


# Test database, shared in-memory SQLite
engine = build_engine("sqlite:///:memory:")
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# 2000-01-03 is a Monday
MONDAY = datetime(2000, 1, 3, tzinfo=timezone.utc)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def store() -> InMemoryAggregateStore:
    return InMemoryAggregateStore()


@pytest.fixture
def evaluator(store: InMemoryAggregateStore) -> VelocityEvaluator:
    return VelocityEvaluator(store)


@pytest.fixture
def make_request() -> Callable[..., LoadRequest]:
    """Factory for load requests; defaults to customer 528 on Monday at noon UTC"""

    def _make(load_id=1, customer_id=528, amount="100", time=None) -> LoadRequest:
        return LoadRequest(
            id=load_id,
            customer_id=customer_id,
            amount=Decimal(amount),
            time=time or MONDAY.replace(hour=12),
        )

    return _make


@pytest.fixture
def make_record() -> Callable[..., LoadRecord]:
    """Factory for already-persisted history records"""

    def _make(load_id, customer_id=528, amount="100", time=None, accepted=True) -> LoadRecord:
        return LoadRecord(
            id=load_id,
            customer_id=customer_id,
            amount=Decimal(amount),
            time=time or MONDAY.replace(hour=9),
            accepted=accepted,
        )

    return _make
