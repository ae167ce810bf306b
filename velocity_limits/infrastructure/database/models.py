"""SQLAlchemy ORM models for persisted load attempts"""

from sqlalchemy import Column, BigInteger, Boolean, DateTime, Index
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class LoadFundsRecord(Base):
    """One processed load attempt (accepted or rejected)"""

    __tablename__ = "load_funds_request"

    # Composite key: the same id may be reused by different customers
    id = Column(BigInteger, primary_key=True, autoincrement=False)
    customer_id = Column(BigInteger, primary_key=True, autoincrement=False)
    amount_cents = Column(BigInteger, nullable=False)
    time = Column(DateTime(timezone=True), nullable=False)
    accepted = Column(Boolean, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index("ix_load_funds_request_customer_time", "customer_id", "accepted", "time"),
    )
